from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from rb_model.catalog import filter_entries, find_entry
from rb_ui.tui.system.components.schema_tree_view import SchemaTreeView, parse_path
from rb_ui.tui.system.components.session_view import render_browser
from rb_ui.tui.system.models import TableModel
from rb_ui.wiring.dependencies import UIContext, ViewBundle


def _open_catalog(ctx: UIContext, directory: Path) -> ViewBundle:
    settings = ctx.settings.model_copy(update={"auto_select": False})
    bundle = ctx.browser(directory, settings=settings).start()
    if ctx.ui.present.session_error(bundle.session):
        raise typer.Exit(1)
    return bundle


def create_catalog_app(ctx: UIContext) -> typer.Typer:
    """Build the catalog Typer app, wired to the given context."""
    app = typer.Typer(help="Browse resource type definitions.", no_args_is_help=True)

    @app.command("list")
    def catalog_list(
        directory: Path = typer.Argument(..., help="Directory with CustomResourceDefinition manifests."),
        query: Optional[str] = typer.Option(None, "--filter", "-f", help="Case-insensitive text filter."),
    ) -> None:
        """List resource types found in DIRECTORY."""
        bundle = _open_catalog(ctx, directory)
        entries = filter_entries(bundle.session.options, query or "")
        if not entries:
            ctx.ui.present.warning("No resource types found.")
            return
        rows = [[entry.kind, entry.display_key, entry.description or ""] for entry in entries]
        ctx.ui.tables.show(TableModel(title="Resource Types", columns=["Kind", "Key", "Description"], rows=rows))

    @app.command("show")
    def catalog_show(
        directory: Path = typer.Argument(..., help="Directory with CustomResourceDefinition manifests."),
        name: str = typer.Argument(..., help="Display key (plural.group) or a filter matching one type."),
        expand_all: bool = typer.Option(False, "--expand-all", help="Expand every schema node."),
        expand: List[str] = typer.Option([], "--expand", "-e", help="Expand a node path such as spec/replicas."),
        yaml_doc: bool = typer.Option(False, "--yaml", help="Open the full schema in $EDITOR."),
    ) -> None:
        """Render the schema tree of one resource type."""
        bundle = _open_catalog(ctx, directory)
        session = bundle.session
        entry = find_entry(session.options, name)
        if entry is None:
            matches = filter_entries(session.options, name)
            if len(matches) != 1:
                ctx.ui.present.error(
                    f"'{name}' matches {len(matches)} resource types; use the full key."
                )
                raise typer.Exit(1)
            entry = matches[0]

        tree = SchemaTreeView()
        tree.bind(session)
        session.select(entry.display_key)
        bundle.pump()
        if ctx.ui.present.session_error(session):
            raise typer.Exit(1)
        if expand_all:
            tree.expand_all()
        for path in expand:
            if not tree.expand(parse_path(path)):
                ctx.ui.present.warning(f"No schema node at '{path}'")
        ctx.ui.views.show(render_browser(session, tree))
        if yaml_doc:
            session.view_raw(entry.display_key)
            bundle.pump()

    return app
