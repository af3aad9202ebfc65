from __future__ import annotations

from pathlib import Path
from typing import List

import typer

from rb_ui.tui.screens.explorer_screen import ExplorerScreen
from rb_ui.wiring.dependencies import UIContext


def register_explore_command(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the interactive `explore` command to the root app."""

    @app.command("explore")
    def explore(
        directory: Path = typer.Argument(..., help="Directory with manifests to browse."),
        instances: bool = typer.Option(
            False, "--instances", help="Browse resource instances instead of resource types."
        ),
        commands: List[str] = typer.Option(
            [], "--command", "-x", help="Run explorer commands non-interactively, in order."
        ),
    ) -> None:
        """Open the interactive explorer (type 'help' at the prompt)."""
        bundle = ctx.instances(directory) if instances else ctx.browser(directory)
        screen = ExplorerScreen(bundle, ctx.ui, instances=instances)
        if commands or ctx.headless:
            screen.start()
            for line in commands:
                if not screen.dispatch(line):
                    break
            return
        screen.run()
