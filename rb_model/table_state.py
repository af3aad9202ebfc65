"""Column/row state behind a results view, with local filter and sort."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from numbers import Number
from typing import Any, Sequence

logger = logging.getLogger(__name__)

ResultRow = list[Any]


class RefreshKind(str, enum.Enum):
    """How a call to ``set_columns_and_rows`` changed the table."""

    SHAPE = "shape"
    DATA = "data"


def _is_numeric(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _cell(row: Sequence[Any], index: int) -> Any:
    if index < len(row):
        return row[index]
    return None


def cell_text(value: Any) -> str:
    """String form used for display, filtering and mixed-type ordering."""
    if value is None:
        return ""
    return str(value)


def compare_cells(left: Any, right: Any) -> int:
    """Three-way compare: numeric when both are numbers, else by string form."""
    left = "" if left is None else left
    right = "" if right is None else right
    if _is_numeric(left) and _is_numeric(right):
        a, b = left, right
    else:
        a, b = cell_text(left), cell_text(right)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def columns_changed(current: Sequence[str], incoming: Sequence[str]) -> bool:
    """True when the column lists differ in length or any position."""
    if len(current) != len(incoming):
        return True
    return any(a != b for a, b in zip(current, incoming))


@dataclass
class TableState:
    """Per-view table state.

    ``rows`` holds the full unfiltered data set in its current sort order.
    Filtering never mutates it; ``visible_rows()`` derives the filtered view.
    """

    columns: list[str] = field(default_factory=list)
    rows: list[ResultRow] = field(default_factory=list)
    sort_column_index: int = -1
    sort_ascending: bool = True
    filter_text: dict[int, str] = field(default_factory=dict)

    @property
    def is_sorted(self) -> bool:
        return self.sort_column_index >= 0

    def clear(self) -> None:
        """Drop all columns, rows, sort and filters."""
        self.columns = []
        self.rows = []
        self._reset_view_state()

    def _reset_view_state(self) -> None:
        self.sort_column_index = -1
        self.sort_ascending = True
        self.filter_text = {}

    def set_columns_and_rows(
        self, columns: Sequence[str], rows: Sequence[Sequence[Any]]
    ) -> RefreshKind:
        """Ingest a results payload.

        A different column list is a shape change: sort and filters are reset
        and callers must rebuild header and filter widgets. Otherwise only the
        rows are replaced and an active sort is reapplied.
        """
        incoming = [str(col) for col in columns]
        kind = RefreshKind.SHAPE if columns_changed(self.columns, incoming) else RefreshKind.DATA
        self.columns = incoming
        self.rows = [list(row) for row in rows]
        if kind is RefreshKind.SHAPE:
            logger.debug("Column shape changed to %s", incoming)
            self._reset_view_state()
        elif self.is_sorted:
            self._sort_rows()
        return kind

    def sort_by(self, column_index: int) -> None:
        """Sort on a column; the active column toggles direction."""
        if not 0 <= column_index < len(self.columns):
            raise IndexError(f"column index {column_index} out of range")
        if column_index == self.sort_column_index:
            self.sort_ascending = not self.sort_ascending
        else:
            self.sort_column_index = column_index
            self.sort_ascending = True
        self._sort_rows()

    def _sort_rows(self) -> None:
        index = self.sort_column_index
        if index < 0:
            return
        # list.sort is stable for both directions, equal keys keep input order.
        self.rows.sort(
            key=cmp_to_key(lambda a, b: compare_cells(_cell(a, index), _cell(b, index))),
            reverse=not self.sort_ascending,
        )

    def set_filter(self, column_index: int, text: str) -> None:
        """Set (or clear, with empty text) the substring filter of one column."""
        if not 0 <= column_index < len(self.columns):
            raise IndexError(f"column index {column_index} out of range")
        if text:
            self.filter_text[column_index] = text
        else:
            self.filter_text.pop(column_index, None)

    def clear_filters(self) -> None:
        self.filter_text = {}

    def column_index(self, name: str) -> int:
        """Index of a column by name, raising KeyError when absent."""
        try:
            return self.columns.index(name)
        except ValueError as exc:
            raise KeyError(name) from exc

    def apply_filters(self) -> list[ResultRow]:
        """Rows passing every non-empty column filter (case-insensitive substring)."""
        active = [(idx, text.lower()) for idx, text in self.filter_text.items() if text]
        if not active:
            return list(self.rows)
        return [
            row
            for row in self.rows
            if all(needle in cell_text(_cell(row, idx)).lower() for idx, needle in active)
        ]

    def visible_rows(self) -> list[ResultRow]:
        return self.apply_filters()

    def status_text(self) -> str:
        return f"Count: {len(self.apply_filters())}"
