"""Message routing shared by the rich and headless presenters.

Front ends only provide a :class:`PresenterSink`; the session reporting,
usage hints and command help built on top of it live here so both render
the same text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, Mapping, Protocol

from rb_ui.tui.system.protocols import Presenter

if TYPE_CHECKING:
    from rb_bridge.session import ViewSession

Level = Literal["info", "warning", "error", "success"]


class PresenterSink(Protocol):
    def emit(self, level: Level, message: str) -> None: ...

    def emit_panel(self, message: str, title: str | None, border_style: str | None) -> None: ...

    def emit_rule(self, title: str) -> None: ...


class PresenterBase(Presenter):
    def __init__(self, sink: PresenterSink) -> None:
        self._sink = sink

    def info(self, message: str) -> None:
        self._sink.emit("info", message)

    def warning(self, message: str) -> None:
        self._sink.emit("warning", message)

    def error(self, message: str) -> None:
        self._sink.emit("error", message)

    def success(self, message: str) -> None:
        self._sink.emit("success", message)

    def panel(self, message: str, title: str | None = None, border_style: str | None = None) -> None:
        self._sink.emit_panel(message, title, border_style)

    def rule(self, title: str) -> None:
        self._sink.emit_rule(title)

    def usage(self, syntax: str) -> None:
        self._sink.emit("warning", f"Usage: {syntax}")

    def session_error(self, session: "ViewSession") -> bool:
        """Show the error the host reported, if any; True when one was shown."""
        if not session.error:
            return False
        self._sink.emit("error", session.error)
        return True

    def session_status(self, session: "ViewSession") -> None:
        if session.status:
            self._sink.emit("info", session.status)

    def commands(self, descriptions: Mapping[str, str], title: str = "Commands") -> None:
        """One aligned line per command, in a titled panel."""
        if not descriptions:
            return
        width = max(len(name) for name in descriptions) + 1
        lines = [f"{name:<{width}} {text}".rstrip() for name, text in descriptions.items()]
        self._sink.emit_panel("\n".join(lines), title, None)
