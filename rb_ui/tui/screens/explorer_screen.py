"""Line-oriented interactive explorer over a view session."""

from __future__ import annotations

import logging
import shlex
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style

from rb_bridge.session import ViewSession
from rb_ui.tui.core import theme
from rb_ui.tui.system.components.results_table_view import ResultsTableView
from rb_ui.tui.system.components.schema_tree_view import SchemaTreeView, parse_path
from rb_ui.tui.system.components.session_view import (
    render_browser,
    render_options,
    render_results,
)
from rb_ui.tui.system.protocols import UI
from rb_ui.wiring.dependencies import ViewBundle

logger = logging.getLogger(__name__)

BROWSER_COMMANDS = (
    "list", "filter", "select", "expand", "collapse", "toggle",
    "expand-all", "collapse-all", "yaml", "show", "help", "quit", "exit",
)
INSTANCE_COMMANDS = (
    "list", "scope", "sort", "where", "open", "show", "help", "quit", "exit",
)

HELP_TEXT = {
    "list": "list the available options",
    "filter": "filter TEXT - narrow the option list (a single match is selected)",
    "select": "select KEY|N - load an option by key or list number",
    "expand": "expand PATH - expand a tree node (e.g. spec/replicas; quote keys holding / or . as 'spec/\"a.io/b\"')",
    "collapse": "collapse PATH - collapse a tree node",
    "toggle": "toggle PATH - flip a tree node",
    "expand-all": "expand every node",
    "collapse-all": "collapse every node",
    "yaml": "open the selected schema in $EDITOR",
    "scope": "scope NAME|N - switch namespace",
    "sort": "sort COLUMN - sort by column (repeat to flip direction)",
    "where": "where COLUMN [TEXT] - filter a column; no text clears it",
    "open": "open N - open the YAML of the N-th visible row",
    "show": "redraw the current view",
    "help": "show this help",
    "quit": "leave the explorer",
}


class ExplorerScreen:
    """Maps typed commands onto session intents and local view operations.

    ``dispatch`` handles one line and returns False once the user quits, so
    the screen can be driven without a terminal.
    """

    def __init__(self, bundle: ViewBundle, ui: UI, *, instances: bool = False) -> None:
        self._bundle = bundle
        self._ui = ui
        self._instances = instances
        self.session: ViewSession = bundle.session
        self.tree = SchemaTreeView()
        self.tree.bind(self.session)
        self.table = ResultsTableView(self.session)
        commands = INSTANCE_COMMANDS if instances else BROWSER_COMMANDS
        self._handlers: dict[str, Callable[[list[str]], bool]] = {
            name: getattr(self, "_cmd_" + name.replace("-", "_")) for name in commands
        }

    @property
    def commands(self) -> list[str]:
        return list(self._handlers)

    def start(self) -> None:
        self._bundle.start()
        self.redraw()

    def redraw(self) -> None:
        self._ui.views.show(render_options(self.session))
        if self._instances:
            self._ui.views.show(render_results(self.session, self.table))
        else:
            self._ui.views.show(render_browser(self.session, self.tree))

    def dispatch(self, line: str) -> bool:
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._ui.present.warning(f"Cannot parse command: {exc}")
            return True
        if not parts:
            return True
        name, args = parts[0].lower(), parts[1:]
        handler = self._handlers.get(name)
        if handler is None:
            self._ui.present.warning(f"Unknown command '{name}'. Type 'help'.")
            return True
        keep_going = handler(args)
        self._bundle.pump()
        return keep_going

    def run(self) -> None:
        """Interactive loop; Ctrl-D or Ctrl-C leaves."""
        self.start()
        prompt: PromptSession[str] = PromptSession(
            completer=WordCompleter(self.commands, ignore_case=True),
            style=Style.from_dict(dict(theme.prompt_toolkit_explorer_style())),
        )
        while True:
            try:
                line = prompt.prompt("rb> ")
            except (EOFError, KeyboardInterrupt):
                break
            if not self.dispatch(line):
                break

    # Shared

    def _option_key(self, token: str) -> str | None:
        options = self.session.visible_options
        if token.isdigit():
            idx = int(token) - 1
            if 0 <= idx < len(options):
                return options[idx].display_key
            return None
        for entry in self.session.options:
            if entry.display_key == token:
                return entry.display_key
        return None

    def _cmd_list(self, args: list[str]) -> bool:
        self._ui.views.show(render_options(self.session))
        return True

    def _cmd_show(self, args: list[str]) -> bool:
        self._bundle.pump()
        self.redraw()
        return True

    def _cmd_help(self, args: list[str]) -> bool:
        self._ui.present.commands(
            {name: HELP_TEXT.get(name, "") for name in self._handlers if name != "exit"}
        )
        return True

    def _cmd_quit(self, args: list[str]) -> bool:
        return False

    _cmd_exit = _cmd_quit

    # Browser

    def _cmd_filter(self, args: list[str]) -> bool:
        matches = self.session.filter_catalog(" ".join(args))
        self._bundle.pump()
        if len(matches) == 1 and args:
            self.redraw()
        else:
            self._ui.views.show(render_options(self.session))
        return True

    def _cmd_select(self, args: list[str]) -> bool:
        if not args:
            self._ui.present.usage("select KEY|N")
            return True
        key = self._option_key(args[0])
        if key is None:
            self._ui.present.warning(f"No option matches '{args[0]}'")
            return True
        self.session.select(key)
        self._bundle.pump()
        self.redraw()
        return True

    def _tree_op(self, args: list[str], op: Callable[[tuple[str, ...]], bool], verb: str) -> bool:
        if not args:
            self._ui.present.usage(f"{verb} PATH")
            return True
        if not op(parse_path(args[0])):
            self._ui.present.warning(f"Cannot {verb} '{args[0]}'")
            return True
        self._ui.views.show(render_browser(self.session, self.tree))
        return True

    def _cmd_expand(self, args: list[str]) -> bool:
        return self._tree_op(args, self.tree.expand, "expand")

    def _cmd_collapse(self, args: list[str]) -> bool:
        return self._tree_op(args, self.tree.collapse, "collapse")

    def _cmd_toggle(self, args: list[str]) -> bool:
        return self._tree_op(args, self.tree.toggle, "toggle")

    def _cmd_expand_all(self, args: list[str]) -> bool:
        self.tree.expand_all()
        self._ui.views.show(render_browser(self.session, self.tree))
        return True

    def _cmd_collapse_all(self, args: list[str]) -> bool:
        self.tree.collapse_all()
        self._ui.views.show(render_browser(self.session, self.tree))
        return True

    def _cmd_yaml(self, args: list[str]) -> bool:
        target = self._option_key(args[0]) if args else None
        if not self.session.view_raw(target):
            self._ui.present.warning("Nothing selected")
        return True

    # Instances

    def _column(self, token: str) -> int | None:
        columns = self.session.table.columns
        if token in columns:
            return columns.index(token)
        if token.isdigit() and 1 <= int(token) <= len(columns):
            return int(token) - 1
        return None

    def _cmd_scope(self, args: list[str]) -> bool:
        if not args:
            self._ui.present.usage("scope NAME|N")
            return True
        token = " ".join(args)
        key = self._option_key(token) if token.isdigit() else token
        if key is None or all(entry.display_key != key for entry in self.session.options):
            self._ui.present.warning(f"Unknown scope '{token}'")
            return True
        self.session.set_scope(key)
        self._bundle.pump()
        self._ui.views.show(render_results(self.session, self.table))
        return True

    def _cmd_sort(self, args: list[str]) -> bool:
        idx = self._column(args[0]) if args else None
        if idx is None:
            self._ui.present.usage("sort COLUMN")
            return True
        self.session.sort_by(idx)
        self._ui.views.show(render_results(self.session, self.table))
        return True

    def _cmd_where(self, args: list[str]) -> bool:
        idx = self._column(args[0]) if args else None
        if idx is None:
            self._ui.present.usage("where COLUMN [TEXT]")
            return True
        self.session.set_filter(idx, " ".join(args[1:]))
        self._ui.views.show(render_results(self.session, self.table))
        return True

    def _cmd_open(self, args: list[str]) -> bool:
        if not args or not args[0].isdigit():
            self._ui.present.usage("open N")
            return True
        row = int(args[0]) - 1
        if not self.session.row_actions or not 0 <= row < len(self.session.visible_rows()):
            self._ui.present.warning(f"No row {args[0]}")
            return True
        fields = self.session.trigger_row_action(self.session.row_actions[0], row)
        logger.debug("Row action %s sent with %s", self.session.row_actions[0].name, fields)
        return True
