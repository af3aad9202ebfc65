from typing import Any, Mapping, Protocol

from rb_ui.tui.system.models import TableModel


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class ViewPresenter(Protocol):
    def show(self, renderable: Any) -> None: ...


class Presenter(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def panel(self, message: str, title: str | None = None, border_style: str | None = None) -> None: ...

    def rule(self, title: str) -> None: ...

    def usage(self, syntax: str) -> None: ...

    def session_error(self, session: Any) -> bool: ...

    def session_status(self, session: Any) -> None: ...

    def commands(self, descriptions: Mapping[str, str], title: str = "Commands") -> None: ...


class UI(Protocol):
    tables: TablePresenter
    views: ViewPresenter
    present: Presenter
