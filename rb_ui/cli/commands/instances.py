from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer

from rb_model.formatters import EXPORT_FORMATS, format_for_export, format_value
from rb_ui.tui.system.models import TableModel
from rb_ui.wiring.dependencies import UIContext

TABLE_FORMAT = "table"


def _parse_filter(raw: str) -> tuple[str, str]:
    column, sep, text = raw.partition("=")
    if not sep or not column:
        raise typer.BadParameter(f"Expected COLUMN=TEXT, got '{raw}'", param_hint="--filter")
    return column, text


def register_instances_command(app: typer.Typer, ctx: UIContext) -> None:
    """Attach the `instances` command to the root app."""

    @app.command("instances")
    def instances(
        directory: Path = typer.Argument(..., help="Directory with resource manifests."),
        scope: Optional[str] = typer.Option(None, "--scope", "-n", help="Namespace to list (default: all)."),
        sort: Optional[str] = typer.Option(None, "--sort", help="Column to sort by."),
        desc: bool = typer.Option(False, "--desc", help="Sort descending."),
        filters: List[str] = typer.Option([], "--filter", "-f", help="Column filter COLUMN=TEXT (repeatable)."),
        fmt: str = typer.Option(TABLE_FORMAT, "--format", help="table, ascii, markdown, json or yaml."),
    ) -> None:
        """List resource instances as a sortable, filterable table."""
        if fmt != TABLE_FORMAT and fmt not in EXPORT_FORMATS:
            raise typer.BadParameter(f"Unknown format '{fmt}'", param_hint="--format")
        parsed_filters = [_parse_filter(raw) for raw in filters]

        settings = ctx.settings.model_copy(update={"auto_select": scope is None})
        bundle = ctx.instances(directory, settings=settings).start()
        session = bundle.session
        if scope is not None:
            session.set_scope(scope)
            bundle.pump()
        if ctx.ui.present.session_error(session):
            raise typer.Exit(1)

        table = session.table
        for column, text in parsed_filters:
            if column not in table.columns:
                ctx.ui.present.error(f"Unknown column '{column}'")
                raise typer.Exit(1)
            session.set_filter(table.columns.index(column), text)
        if sort is not None:
            if sort not in table.columns:
                ctx.ui.present.error(f"Unknown column '{sort}'")
                raise typer.Exit(1)
            session.sort_by(table.columns.index(sort))
            if desc:
                session.sort_by(table.columns.index(sort))

        rows = session.visible_rows()
        if fmt != TABLE_FORMAT:
            typer.echo(format_for_export(fmt, table.columns, rows))
            return
        title = f"Instances ({session.scope or session.selected or ctx.settings.all_scopes_label})"
        ctx.ui.tables.show(
            TableModel(
                title=title,
                columns=list(table.columns),
                rows=[[format_value(cell) for cell in row] for row in rows],
            )
        )
        ctx.ui.present.session_status(session)
