from __future__ import annotations

from typing import Mapping

RICH_ACCENT = "blue"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = RICH_ACCENT

PRESENTER_TEMPLATES: dict[str, str] = {
    "info": "[blue]ℹ[/blue] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}

TREE_NAME_STYLE = "bold"
TREE_REQUIRED_STYLE = "bold red"
TREE_TYPE_STYLE = "cyan"
TREE_DESCRIPTION_STYLE = "dim"
TREE_UNRENDERABLE_STYLE = "reverse red"
TREE_EXPANDED_GLYPH = "▾"
TREE_COLLAPSED_GLYPH = "▸"
TREE_LEAF_GLYPH = "•"

SORT_ASC_GLYPH = "▲"
SORT_DESC_GLYPH = "▼"
FILTER_ROW_STYLE = "dim italic"
FILTER_PLACEHOLDER = "filter…"
STATUS_STYLE = "dim"
LOADING_STYLE = "yellow"
ERROR_STYLE = "bold red"
SELECTED_OPTION_STYLE = "bold green"


def panel_title(text: str) -> str:
    return f"[{RICH_ACCENT_BOLD}]{text}[/{RICH_ACCENT_BOLD}]"


def presenter_message(level: str, message: str) -> str:
    template = PRESENTER_TEMPLATES.get(level, "{message}")
    return template.format(message=message)


def sort_indicator(ascending: bool) -> str:
    return SORT_ASC_GLYPH if ascending else SORT_DESC_GLYPH


def prompt_toolkit_explorer_style() -> Mapping[str, str]:
    return {
        "prompt": "fg:#0000aa bold",
        "completion-menu.completion": "bg:#eeeeee fg:#000000",
        "completion-menu.completion.current": "bg:#0000aa fg:white bold",
        "bottom-toolbar": "bg:#eeeeee fg:#333333",
    }
