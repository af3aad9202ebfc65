from rich.console import Console
from rich.text import Text

from rb_ui.tui.core import theme
from rb_ui.tui.system.components.table_layout import build_rich_table
from rb_ui.tui.system.models import TableModel
from rb_ui.tui.system.protocols import TablePresenter


class RichTablePresenter(TablePresenter):
    def __init__(self, console: Console):
        self._console = console

    def show(self, table: TableModel) -> None:
        rich_table = build_rich_table(
            table.title,
            table.columns,
            table.rows,
            console=self._console,
            show_lines=True,
            border_style=theme.RICH_BORDER_STYLE,
            header_style=theme.RICH_ACCENT_BOLD,
            title_style=theme.RICH_ACCENT_BOLD,
        )
        for row in table.rows:
            rich_table.add_row(*(Text(cell) for cell in row))
        self._console.print(rich_table)
