"""Wire messages exchanged between a view and its host.

Every message is a JSON object with a ``command`` discriminant. Inbound
events (host to view) and outbound intents (view to host) are closed unions
validated with pydantic; anything that fails validation is a protocol
desync and surfaces as :class:`ProtocolError`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from rb_common.errors import ProtocolError
from rb_model.catalog import CatalogEntry


class _Message(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready mapping using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def _token_field() -> Any:
    return Field(
        default=None,
        validation_alias=AliasChoices("requestId", "request_id"),
        serialization_alias="requestId",
    )


# Outbound intents (view -> host)


class ReadyIntent(_Message):
    command: Literal["ready"] = "ready"


class SelectIntent(_Message):
    command: Literal["select"] = "select"
    name: str
    request_id: int | None = _token_field()


class SetScopeIntent(_Message):
    command: Literal["setScope"] = "setScope"
    value: str
    request_id: int | None = _token_field()


class ViewYamlIntent(_Message):
    command: Literal["viewYaml"] = "viewYaml"
    name: str


class RowActionIntent(_Message):
    command: Literal["rowAction"] = "rowAction"
    action: str
    fields: dict[str, Any] = Field(default_factory=dict)


OutboundIntent = Annotated[
    Union[ReadyIntent, SelectIntent, SetScopeIntent, ViewYamlIntent, RowActionIntent],
    Field(discriminator="command"),
]


# Inbound events (host -> view)


class InitEvent(_Message):
    command: Literal["init"] = "init"
    options: list[CatalogEntry] = Field(default_factory=list)
    selected_option: str | None = Field(
        default=None,
        validation_alias=AliasChoices("selectedOption", "selected_option", "selected"),
        serialization_alias="selectedOption",
    )

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_plain_options(cls, value: Any) -> Any:
        # Plain strings (e.g. namespaces) become entries keyed by themselves.
        if isinstance(value, list):
            return [
                {"displayKey": item, "kind": item} if isinstance(item, str) else item
                for item in value
            ]
        return value


class ClearEvent(_Message):
    command: Literal["clear"] = "clear"


class ResultsEvent(_Message):
    command: Literal["results"] = "results"
    columns: list[str]
    rows: list[list[Any]]
    status: str | None = None
    request_id: int | None = _token_field()


class ResourceDataEvent(_Message):
    command: Literal["resourceData"] = "resourceData"
    details: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("details", "schema")
    )
    kind: str | None = None
    description: str | None = None
    raw_text: str = Field(
        default="",
        validation_alias=AliasChoices("rawText", "raw_text", "yaml"),
        serialization_alias="rawText",
    )
    request_id: int | None = _token_field()


class ErrorEvent(_Message):
    command: Literal["error"] = "error"
    message: str = Field(validation_alias=AliasChoices("message", "error"))
    request_id: int | None = _token_field()


InboundEvent = Annotated[
    Union[InitEvent, ClearEvent, ResultsEvent, ResourceDataEvent, ErrorEvent],
    Field(discriminator="command"),
]

_INBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(InboundEvent)
_OUTBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(OutboundIntent)


def _parse(adapter: TypeAdapter[Any], payload: Any, direction: str) -> Any:
    if not isinstance(payload, Mapping):
        raise ProtocolError(
            f"{direction} message must be an object",
            context={"payload_type": type(payload).__name__},
        )
    try:
        return adapter.validate_python(dict(payload))
    except ValidationError as exc:
        raise ProtocolError(
            f"Invalid {direction} message",
            context={"command": payload.get("command"), "errors": exc.errors(include_url=False)},
            cause=exc,
        ) from exc


def parse_inbound(payload: Any) -> InitEvent | ClearEvent | ResultsEvent | ResourceDataEvent | ErrorEvent:
    """Validate a host event, raising ProtocolError on desync."""
    return _parse(_INBOUND_ADAPTER, payload, "inbound")


def parse_outbound(
    payload: Any,
) -> ReadyIntent | SelectIntent | SetScopeIntent | ViewYamlIntent | RowActionIntent:
    """Validate a view intent, raising ProtocolError on desync."""
    return _parse(_OUTBOUND_ADAPTER, payload, "outbound")
