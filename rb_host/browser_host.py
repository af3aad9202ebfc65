"""Host side of the resource-type browser view."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import yaml

from rb_bridge.messages import (
    InitEvent,
    ReadyIntent,
    ResourceDataEvent,
    SelectIntent,
    ViewYamlIntent,
    parse_outbound,
)
from rb_common.errors import CatalogError, ProtocolError, RBError, error_to_payload
from rb_host.documents import DocumentOpener, open_best_effort
from rb_host.providers import DirectoryCatalogProvider

logger = logging.getLogger(__name__)

PostFn = Callable[[Mapping[str, Any]], None]


def metadata_yaml(api_version: str, kind: str) -> str:
    return yaml.safe_dump({"apiVersion": api_version, "kind": kind}, sort_keys=False, indent=2)


class ResourceBrowserHost:
    """Answers ``ready``/``select``/``viewYaml`` intents from a catalog provider."""

    def __init__(
        self,
        post: PostFn,
        provider: DirectoryCatalogProvider,
        *,
        opener: DocumentOpener | None = None,
        target: tuple[str, str] | None = None,
    ) -> None:
        self._post = post
        self._provider = provider
        self._opener = opener
        self._target = target

    def _send(self, event: Any) -> None:
        self._post(event.to_wire())

    def _send_error(self, error: RBError, request_id: int | None = None) -> None:
        self._post(error_to_payload(error, request_id))

    def handle(self, payload: Any) -> None:
        try:
            intent = parse_outbound(payload)
        except ProtocolError as exc:
            logger.warning("Ignoring view message: %s", exc)
            return
        if isinstance(intent, ReadyIntent):
            self._load_catalog()
        elif isinstance(intent, SelectIntent):
            self._show_resource(intent.name, intent.request_id)
        elif isinstance(intent, ViewYamlIntent):
            self._open_resource_yaml(intent.name)
        else:
            logger.debug("Browser host does not handle %s", intent.command)

    def _load_catalog(self) -> None:
        try:
            entries = self._provider.list_entries()
        except RBError as exc:
            logger.warning("Failed to list resource types: %s", exc)
            self._send_error(exc)
            return
        selected: str | None = None
        if self._target is not None:
            match = self._provider.find_kind(*self._target)
            selected = match.display_key if match else None
        self._send(InitEvent(options=entries, selected_option=selected))

    def _show_resource(self, name: str, request_id: int | None) -> None:
        definition = self._provider.find(name)
        if definition is None:
            self._send_error(
                CatalogError(f"Unknown resource type: {name}", context={"name": name}), request_id
            )
            return
        try:
            schema = self._provider.get_schema(definition.display_key)
        except RBError as exc:
            logger.warning("Failed to load schema for %s: %s", name, exc)
            self._send_error(exc, request_id)
            return
        self._send(
            ResourceDataEvent(
                details=schema,
                kind=definition.kind,
                description=definition.description,
                raw_text=metadata_yaml(definition.api_version, definition.kind),
                request_id=request_id,
            )
        )

    def _open_resource_yaml(self, name: str) -> None:
        definition = self._provider.find(name)
        if definition is None or definition.schema is None:
            logger.debug("Nothing to open for %s", name)
            return
        text = yaml.safe_dump(definition.schema, sort_keys=False, indent=2)
        open_best_effort(self._opener, text, "yaml")
