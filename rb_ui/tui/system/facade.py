from typing import Any, Sequence

from rich.console import Console

from rb_ui.tui.system.components.presenter import RichPresenter
from rb_ui.tui.system.components.table import RichTablePresenter
from rb_ui.tui.system.models import TableModel
from rb_ui.tui.system.protocols import Presenter, TablePresenter, UI, ViewPresenter


class RichViewPresenter(ViewPresenter):
    def __init__(self, console: Console) -> None:
        self._console = console

    def show(self, renderable: Any) -> None:
        self._console.print(renderable)


class TUI(UI):
    def __init__(self, console: Console | None = None):
        self.console = console or Console()
        self.tables: TablePresenter = RichTablePresenter(self.console)
        self.views: ViewPresenter = RichViewPresenter(self.console)
        self.present: Presenter = RichPresenter(self.console)

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        model = TableModel(title=title, columns=list(columns), rows=[list(r) for r in rows])
        self.tables.show(model)
