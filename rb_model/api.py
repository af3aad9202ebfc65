"""Public API surface for the model layer."""

from rb_model.catalog import CatalogEntry, filter_entries, find_entry
from rb_model.formatters import (
    EXPORT_FORMATS,
    format_for_export,
    format_value,
    prune_empty_columns,
)
from rb_model.schema_tree import (
    DEFAULT_MAX_DEPTH,
    MappingSchema,
    SchemaNode,
    SchemaSource,
    build_tree,
    display_type,
)
from rb_model.table_state import RefreshKind, ResultRow, TableState, compare_cells

__all__ = [
    "CatalogEntry",
    "DEFAULT_MAX_DEPTH",
    "EXPORT_FORMATS",
    "MappingSchema",
    "RefreshKind",
    "ResultRow",
    "SchemaNode",
    "SchemaSource",
    "TableState",
    "build_tree",
    "compare_cells",
    "display_type",
    "filter_entries",
    "find_entry",
    "format_for_export",
    "format_value",
    "prune_empty_columns",
]
