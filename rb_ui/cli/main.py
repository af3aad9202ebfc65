"""
Command-line interface for resource-browser.

Browse resource type schemas as collapsible trees and list resource instances
as sortable, filterable tables, from manifests stored in a directory.
"""

from __future__ import annotations

import typer

from rb_ui.cli.commands.catalog import create_catalog_app
from rb_ui.cli.commands.explore import register_explore_command
from rb_ui.cli.commands.instances import register_instances_command
from rb_ui.wiring.dependencies import UIContext, configure_logging

# Initialize global context (lazy)
ctx_store = UIContext()

catalog_app = create_catalog_app(ctx_store)

app = typer.Typer(help="Browse resource schemas and instances from manifest directories.", no_args_is_help=True)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Force headless output (useful in CI).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging.",
    ),
) -> None:
    """Global entry point handling interactive vs headless modes."""
    configure_logging(debug=debug, force=True)
    ctx_store.headless = headless
    ctx_store.debug = debug

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


app.add_typer(catalog_app, name="catalog")
register_instances_command(app, ctx_store)
register_explore_command(app, ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
