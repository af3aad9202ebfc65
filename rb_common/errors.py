"""Shared error taxonomy for resource-browser."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar


def _normalize_context_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return normalize_context(value)
    if isinstance(value, (list, tuple)):
        return [_normalize_context_value(item) for item in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


def normalize_context(context: Mapping[str, Any]) -> dict[str, Any]:
    """Return a JSON-friendly copy of an error context mapping."""
    return {key: _normalize_context_value(val) for key, val in context.items()}


class RBError(Exception):
    """Base error type for typed failure handling."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.context = normalize_context(context or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def error_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.error_type, "message": str(self), "context": self.context}


class CatalogError(RBError):
    """Failure listing catalog entries or resolving a schema."""


class SchemaError(RBError):
    """Failure reading or decoding a schema document."""


class ProtocolError(RBError):
    """Malformed or unexpected message on the host/view channel."""


class DocumentOpenError(RBError):
    """Failure handing a document to the external editor."""


class ConfigurationError(RBError):
    """Failure due to invalid configuration."""


T = TypeVar("T", bound=RBError)


def wrap_error(
    error_cls: type[T],
    message: str,
    *,
    context: Mapping[str, Any] | None = None,
    cause: Exception | None = None,
) -> T:
    """Create a typed RBError with optional context and cause."""
    return error_cls(message, context=context, cause=cause)


def error_to_payload(error: RBError, request_id: int | None = None) -> dict[str, Any]:
    """Convert an RBError to an ``error`` event payload.

    ``request_id`` echoes the token of the intent that failed.
    """
    payload: dict[str, Any] = {"command": "error", "message": str(error)}
    if request_id is not None:
        payload["requestId"] = request_id
    return payload
