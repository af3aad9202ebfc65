from __future__ import annotations

import shutil
from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

MIN_COL_WIDTH = 4


def console_width(console: Console) -> int | None:
    try:
        width = int(getattr(console.size, "width"))
        if width > 0:
            return width
    except (AttributeError, TypeError, ValueError):
        pass
    width = int(shutil.get_terminal_size(fallback=(100, 24)).columns)
    return width if width > 0 else None


def _cell_width(value: str) -> int:
    # Multi-line cells are as wide as their longest line.
    return max((len(line) for line in str(value).splitlines()), default=0)


def fit_column_widths(
    columns: Sequence[str], rows: Sequence[Sequence[str]], max_table_width: int
) -> list[int]:
    """Shrink the widest columns until the approximate table width fits."""
    column_count = max(1, len(columns))
    # Rough overhead for borders + separators + padding.
    overhead = 4 + (column_count - 1) * 3

    desired: list[int] = []
    for idx, col in enumerate(columns):
        max_len = _cell_width(col)
        for row in rows:
            if idx < len(row):
                max_len = max(max_len, _cell_width(row[idx]))
        desired.append(max(MIN_COL_WIDTH, min(max_len, max_table_width)))

    while desired and sum(desired) + overhead > max_table_width:
        widest = max(range(len(desired)), key=lambda i: desired[i])
        if desired[widest] <= MIN_COL_WIDTH:
            break
        desired[widest] -= 1
    return desired


def build_rich_table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    console: Console,
    show_lines: bool = False,
    border_style: str = "blue",
    header_style: str = "bold blue",
    title_style: str = "bold blue",
    caption: str | None = None,
    box_style: box.Box = box.ROUNDED,
) -> Table:
    """
    Build a Rich Table that fits the current terminal width.

    Columns are rendered as single-line and truncated with ellipsis when needed.
    """
    term_width = console_width(console)
    max_table_width = max(60, (term_width - 2) if term_width else 100)

    title_text = Text.from_markup(str(title))
    title_text.no_wrap = True
    title_text.overflow = "ellipsis"
    title_max = max(10, max_table_width - 6)
    if len(title_text) > title_max:
        title_text.truncate(title_max, overflow="ellipsis")

    rich_table = Table(
        title=title_text,
        caption=Text(caption) if caption else None,
        show_lines=show_lines,
        width=max_table_width,
        box=box_style,
        border_style=border_style,
        header_style=header_style,
        title_style=title_style,
    )

    desired = fit_column_widths(columns, rows, max_table_width)
    for idx, col in enumerate(columns):
        rich_table.add_column(
            Text(col),
            overflow="ellipsis",
            no_wrap=True,
            min_width=MIN_COL_WIDTH,
            max_width=desired[idx] if idx < len(desired) else None,
        )
    return rich_table
