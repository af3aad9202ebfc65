"""Public API surface for the terminal front-end."""

from rb_ui.tui.screens.explorer_screen import ExplorerScreen
from rb_ui.tui.system.components.results_table_view import ResultsTableView, describe_row_fields
from rb_ui.tui.system.components.schema_tree_view import SchemaTreeView, TreeRow, parse_path
from rb_ui.tui.system.components.session_view import render_browser, render_options, render_results
from rb_ui.tui.system.facade import TUI
from rb_ui.tui.system.headless import HeadlessUI
from rb_ui.wiring.dependencies import (
    UIContext,
    ViewBundle,
    build_browser_bundle,
    build_instances_bundle,
)

__all__ = [
    "ExplorerScreen",
    "HeadlessUI",
    "ResultsTableView",
    "SchemaTreeView",
    "TUI",
    "TreeRow",
    "UIContext",
    "ViewBundle",
    "build_browser_bundle",
    "build_instances_bundle",
    "describe_row_fields",
    "parse_path",
    "render_browser",
    "render_options",
    "render_results",
]
