"""Full-view composition: option list, header, and the tree or results grid."""

from __future__ import annotations

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from rb_bridge.session import BridgeState, ViewSession
from rb_ui.tui.core import theme
from rb_ui.tui.system.components.results_table_view import ResultsTableView
from rb_ui.tui.system.components.schema_tree_view import SchemaTreeView

MAX_LISTED_OPTIONS = 20


def render_options(session: ViewSession, limit: int = MAX_LISTED_OPTIONS) -> Text:
    options = session.visible_options
    text = Text()
    if session.catalog_query:
        text.append(f"Filter: {session.catalog_query}\n", style=theme.STATUS_STYLE)
    if not options:
        text.append("No matching entries", style=theme.STATUS_STYLE)
        return text
    for idx, entry in enumerate(options[:limit], start=1):
        active = entry.display_key in (session.selected, session.scope)
        marker = "●" if active else "○"
        style = theme.SELECTED_OPTION_STYLE if active else ""
        text.append(f"{marker} {idx:>2}. {entry.label}\n", style=style)
    hidden = len(options) - limit
    if hidden > 0:
        text.append(f"… {hidden} more", style=theme.STATUS_STYLE)
    return text


def render_browser(session: ViewSession, tree_view: SchemaTreeView) -> RenderableType:
    """Header (kind, metadata, description) above the collapsible schema tree."""
    if session.error:
        return Panel(
            Text(session.error, style=theme.ERROR_STYLE),
            title=theme.panel_title("Error"),
            border_style="red",
        )
    if session.state is BridgeState.LOADING:
        return Text(session.status, style=theme.LOADING_STYLE)
    if not tree_view.nodes:
        return Text("No resource selected", style=theme.STATUS_STYLE)

    parts: list[RenderableType] = []
    if session.resource_kind:
        parts.append(Text(session.resource_kind, style=theme.RICH_ACCENT_BOLD))
    if session.raw_text:
        parts.append(Syntax(session.raw_text.rstrip(), "yaml", theme="ansi_dark", background_color="default"))
    if session.resource_description:
        parts.append(Text(session.resource_description, style=theme.TREE_DESCRIPTION_STYLE))
    parts.append(tree_view.render())
    return Group(*parts)


def render_results(
    session: ViewSession, table_view: ResultsTableView, console: Console | None = None
) -> RenderableType:
    scope = session.scope or "-"
    header = Text(f"Scope: {scope}", style=theme.STATUS_STYLE)
    return Group(header, table_view.render(console))
