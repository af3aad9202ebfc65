"""
UI adapter package providing Rich-based and headless renderers.
"""

from rb_ui.tui.system.facade import TUI
from rb_ui.tui.system.headless import HeadlessUI
from rb_ui.tui.system.protocols import UI, Presenter, TablePresenter, ViewPresenter

__all__ = [
    "UI",
    "TUI",
    "HeadlessUI",
    "TablePresenter",
    "Presenter",
    "ViewPresenter",
]
