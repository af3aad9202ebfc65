"""Cell formatting and export of visible table rows."""

from __future__ import annotations

import json
from typing import Any, Literal, Mapping, Sequence

import yaml

ExportFormat = Literal["ascii", "markdown", "json", "yaml"]
EXPORT_FORMATS: tuple[str, ...] = ("ascii", "markdown", "json", "yaml")


def format_value(value: Any) -> str:
    """Render a cell value as display text.

    Lists of scalars join with ", ", lists containing structures join with
    newlines, mappings render as ``key: value`` pairs and null is empty.
    """
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        parts = [format_value(item) for item in value]
        scalar = all(not isinstance(item, (list, tuple, Mapping)) for item in value)
        return (", " if scalar else "\n").join(parts)
    if isinstance(value, Mapping):
        return ", ".join(f"{key}: {format_value(val)}" for key, val in value.items())
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def prune_empty_columns(
    columns: Sequence[str], rows: Sequence[Sequence[Any]]
) -> tuple[list[str], list[list[Any]]]:
    """Drop columns whose formatted value is empty in every row."""
    if not rows:
        return list(columns), [list(row) for row in rows]
    keep = [
        idx
        for idx in range(len(columns))
        if any(format_value(row[idx] if idx < len(row) else None) for row in rows)
    ]
    return (
        [columns[idx] for idx in keep],
        [[row[idx] if idx < len(row) else None for idx in keep] for row in rows],
    )


def _cells(columns: Sequence[str], row: Sequence[Any]) -> list[str]:
    return [format_value(row[idx] if idx < len(row) else None) for idx in range(len(columns))]


def to_ascii_table(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    if not columns:
        return ""
    body = [_cells(columns, row) for row in rows]
    widths = [
        max([len(col)] + [len(cells[idx]) for cells in body]) for idx, col in enumerate(columns)
    ]
    rule = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(values: Sequence[str]) -> str:
        return "|" + "|".join(f" {val.ljust(widths[idx])} " for idx, val in enumerate(values)) + "|"

    return "\n".join([rule, line(columns), rule, *(line(cells) for cells in body), rule])


def to_markdown_table(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    if not columns:
        return ""
    header = "| " + " | ".join(columns) + " |"
    separator = "| " + " | ".join("---" for _ in columns) + " |"
    lines = [
        "| "
        + " | ".join(
            cell.replace("|", "\\|").replace("\n", "<br/>") for cell in _cells(columns, row)
        )
        + " |"
        for row in rows
    ]
    return "\n".join([header, separator, *lines])


def rows_as_records(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> list[dict[str, Any]]:
    return [
        {col: (row[idx] if idx < len(row) else None) for idx, col in enumerate(columns)}
        for row in rows
    ]


def to_json(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    return json.dumps(rows_as_records(columns, rows), indent=2, default=str)


def to_yaml(columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    records = [
        {col: format_value(row[idx] if idx < len(row) else None) for idx, col in enumerate(columns)}
        for row in rows
    ]
    return yaml.safe_dump_all(records, sort_keys=False, default_flow_style=False)


def format_for_export(
    fmt: ExportFormat | str, columns: Sequence[str], rows: Sequence[Sequence[Any]]
) -> str:
    """Serialize rows in one of :data:`EXPORT_FORMATS`."""
    if fmt == "ascii":
        return to_ascii_table(columns, rows)
    if fmt == "markdown":
        return to_markdown_table(columns, rows)
    if fmt == "json":
        return to_json(columns, rows)
    if fmt == "yaml":
        return to_yaml(columns, rows)
    raise ValueError(f"Unsupported export format: {fmt!r}")
