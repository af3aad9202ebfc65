from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from rb_ui.tui.core import theme
from rb_ui.tui.system.components.presenter_base import Level, PresenterBase, PresenterSink


class _RichPresenterSink(PresenterSink):
    def __init__(self, console: Console) -> None:
        self._console = console

    def emit(self, level: Level, message: str) -> None:
        self._console.print(theme.presenter_message(level, escape(message)))

    def emit_panel(self, message: str, title: str | None, border_style: str | None) -> None:
        # Panel bodies are plain text; only the title uses theme markup.
        self._console.print(
            Panel(
                Text(message),
                title=theme.panel_title(escape(title)) if title else None,
                border_style=border_style or theme.RICH_BORDER_STYLE,
            )
        )

    def emit_rule(self, title: str) -> None:
        self._console.print(Rule(title))


class RichPresenter(PresenterBase):
    def __init__(self, console: Console) -> None:
        super().__init__(_RichPresenterSink(console))
