"""Public API surface for shared helpers."""

from rb_common.config.settings import BrowserSettings
from rb_common.errors import (
    CatalogError,
    ConfigurationError,
    DocumentOpenError,
    ProtocolError,
    RBError,
    SchemaError,
    error_to_payload,
    wrap_error,
)
from rb_common.logging import configure_logging

__all__ = [
    "BrowserSettings",
    "CatalogError",
    "ConfigurationError",
    "DocumentOpenError",
    "ProtocolError",
    "RBError",
    "SchemaError",
    "configure_logging",
    "error_to_payload",
    "wrap_error",
]
