import io
from dataclasses import dataclass, field
from typing import Any

from rich.console import Console

from rb_ui.tui.system.components.presenter_base import Level, PresenterBase, PresenterSink
from rb_ui.tui.system.models import TableModel
from rb_ui.tui.system.protocols import UI, TablePresenter, ViewPresenter


@dataclass
class RecordedTable:
    model: TableModel


@dataclass
class HeadlessUI(UI):
    recorded_tables: list[RecordedTable] = field(default_factory=list)
    recorded_messages: list[str] = field(default_factory=list)
    recorded_views: list[str] = field(default_factory=list)
    width: int = 120

    def __post_init__(self):
        self.tables = _HeadlessTablePresenter(self)
        self.views = _HeadlessViewPresenter(self)
        self.present = _HeadlessPresenter(self)


class _HeadlessTablePresenter(TablePresenter):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def show(self, table: TableModel) -> None:
        self._ui.recorded_tables.append(RecordedTable(table))


class _HeadlessViewPresenter(ViewPresenter):
    """Renders to plain text so tests and CI logs can inspect the output."""

    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def show(self, renderable: Any) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, width=self._ui.width, color_system=None, force_terminal=False)
        console.print(renderable)
        self._ui.recorded_views.append(buffer.getvalue())


class _HeadlessPresenterSink(PresenterSink):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def emit(self, level: Level, message: str) -> None:
        self._ui.recorded_messages.append(f"{level.upper()}: {message}")

    def emit_panel(self, message: str, title: str | None, border_style: str | None) -> None:
        self._ui.recorded_messages.append(f"PANEL: {title} - {message}")

    def emit_rule(self, title: str) -> None:
        self._ui.recorded_messages.append(f"RULE: {title}")


class _HeadlessPresenter(PresenterBase):
    def __init__(self, ui: HeadlessUI) -> None:
        super().__init__(_HeadlessPresenterSink(ui))
