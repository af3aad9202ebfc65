"""Grid rendering of a session's table state.

Header and filter-row cells are rebuilt only on a shape change (or when the
table is cleared); sorting, filtering and same-shape refreshes only rebuild
the body. Row actions are listed in a leading ``Actions`` column.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from rb_bridge.session import SessionChange, ViewSession
from rb_model.formatters import format_value
from rb_ui.tui.core import theme
from rb_ui.tui.system.components.table_layout import build_rich_table

ACTIONS_COLUMN = "Actions"


class ResultsTableView:
    def __init__(self, session: ViewSession, *, title: str = "Results") -> None:
        self._session = session
        self.title = title
        self.header_generation = 0
        self.body_generation = 0
        self._columns: list[str] = []
        self._body: list[list[str]] = []
        session.subscribe(self._on_change)
        self._rebuild_header()
        self._rebuild_body()

    def _on_change(self, change: SessionChange) -> None:
        if change in (SessionChange.TABLE_SHAPE, SessionChange.LOADING, SessionChange.ERROR):
            self._rebuild_header()
            self._rebuild_body()
        elif change is SessionChange.TABLE_ROWS:
            self._rebuild_body()

    def _rebuild_header(self) -> None:
        self._columns = list(self._session.table.columns)
        self.header_generation += 1

    def _rebuild_body(self) -> None:
        self._body = [
            [format_value(row[idx] if idx < len(row) else None) for idx in range(len(self._columns))]
            for row in self._session.visible_rows()
        ]
        self.body_generation += 1

    @property
    def has_actions(self) -> bool:
        return bool(self._session.row_actions) and bool(self._columns)

    def header_labels(self) -> list[str]:
        table = self._session.table
        labels = []
        for idx, column in enumerate(self._columns):
            if idx == table.sort_column_index:
                labels.append(f"{column} {theme.sort_indicator(table.sort_ascending)}")
            else:
                labels.append(column)
        return labels

    def filter_cells(self) -> list[str]:
        filters = self._session.table.filter_text
        return [filters.get(idx, "") for idx in range(len(self._columns))]

    def body_rows(self) -> list[list[str]]:
        return [list(row) for row in self._body]

    def action_cell(self) -> str:
        return " ".join(f"[{action.label}]" for action in self._session.row_actions)

    def render(self, console: Console | None = None) -> Table | Text:
        session = self._session
        if session.error:
            return Text(session.error, style=theme.ERROR_STYLE)
        if not self._columns:
            style = theme.LOADING_STYLE if session.status else theme.STATUS_STYLE
            return Text(session.status or "No results", style=style)

        columns = self.header_labels()
        filters = [text or theme.FILTER_PLACEHOLDER for text in self.filter_cells()]
        body = self.body_rows()
        if self.has_actions:
            columns = [ACTIONS_COLUMN, *columns]
            filters = ["", *filters]
            body = [[self.action_cell(), *row] for row in body]

        table = build_rich_table(
            self.title,
            columns,
            [filters, *body],
            console=console or Console(),
            border_style=theme.RICH_BORDER_STYLE,
            header_style=theme.RICH_ACCENT_BOLD,
            title_style=theme.RICH_ACCENT_BOLD,
            caption=session.status,
        )
        table.add_row(*(Text(cell, style=theme.FILTER_ROW_STYLE) for cell in filters), end_section=True)
        for row in body:
            table.add_row(*(Text(cell) for cell in row))
        return table


def describe_row_fields(session: ViewSession, visible_index: int) -> dict[str, Any]:
    """Column name to raw cell value for one visible row."""
    row = session.visible_rows()[visible_index]
    return {col: (row[idx] if idx < len(row) else None) for idx, col in enumerate(session.table.columns)}
