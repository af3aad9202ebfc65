"""Host side of the instance results table view."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import yaml

from rb_bridge.messages import (
    ClearEvent,
    InitEvent,
    ReadyIntent,
    ResultsEvent,
    RowActionIntent,
    SelectIntent,
    SetScopeIntent,
    parse_outbound,
)
from rb_common.config.settings import BrowserSettings
from rb_common.errors import CatalogError, ProtocolError, RBError, error_to_payload
from rb_host.aggregator import ResultsAggregator
from rb_host.documents import DocumentOpener, open_best_effort
from rb_host.providers import InstanceProvider

logger = logging.getLogger(__name__)

PostFn = Callable[[Mapping[str, Any]], None]

VIEW_YAML_ACTION = "viewYaml"
NO_RESULTS_STATUS = "No matching resources"


def instance_row(document: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten a manifest into the row fields shown in the table."""
    metadata = document.get("metadata") or {}
    status = document.get("status")
    row: dict[str, Any] = {
        "name": metadata.get("name"),
        "namespace": metadata.get("namespace"),
        "kind": document.get("kind"),
        "apiVersion": document.get("apiVersion"),
        "created": metadata.get("creationTimestamp"),
        "labels": metadata.get("labels"),
    }
    if isinstance(status, Mapping):
        for key, value in status.items():
            if not isinstance(value, (Mapping, list)):
                row[f"status.{key}"] = value
    return row


class InstanceResultsHost:
    """Serves namespace-scoped instance rows and row actions."""

    def __init__(
        self,
        post: PostFn,
        provider: InstanceProvider,
        *,
        opener: DocumentOpener | None = None,
        settings: BrowserSettings | None = None,
    ) -> None:
        self._post = post
        self._provider = provider
        self._opener = opener
        self._settings = settings or BrowserSettings()
        self._aggregator = ResultsAggregator()

    def _send(self, event: Any) -> None:
        self._post(event.to_wire())

    def handle(self, payload: Any) -> None:
        try:
            intent = parse_outbound(payload)
        except ProtocolError as exc:
            logger.warning("Ignoring view message: %s", exc)
            return
        if isinstance(intent, ReadyIntent):
            self._send_scopes()
        elif isinstance(intent, SetScopeIntent):
            self._run_scope(intent.value, intent.request_id)
        elif isinstance(intent, SelectIntent):
            self._run_scope(intent.name, intent.request_id)
        elif isinstance(intent, RowActionIntent):
            self._run_row_action(intent)
        else:
            logger.debug("Instance host does not handle %s", intent.command)

    def _send_scopes(self) -> None:
        label = self._settings.all_scopes_label
        try:
            namespaces = self._provider.namespaces()
        except RBError as exc:
            logger.warning("Failed to list namespaces: %s", exc)
            self._post(error_to_payload(exc))
            return
        self._send(InitEvent(options=[label, *namespaces], selected_option=label))

    def _run_scope(self, value: str, request_id: int | None) -> None:
        namespace = None if value == self._settings.all_scopes_label else value
        self._aggregator.reset()
        self._send(ClearEvent())
        try:
            documents = self._provider.list_instances(namespace)
        except RBError as exc:
            logger.warning("Failed to list instances in %s: %s", value, exc)
            self._post(error_to_payload(exc, request_id))
            return
        self._aggregator.apply(
            [
                {
                    "insert_or_modify": {
                        "rows": [
                            {"id": self._row_id(doc), "data": instance_row(doc)}
                            for doc in documents
                        ]
                    }
                }
            ]
        )
        columns, rows = self._aggregator.snapshot(prune=self._settings.prune_empty_columns)
        status = f"Count: {len(rows)}" if rows else NO_RESULTS_STATUS
        self._send(ResultsEvent(columns=columns, rows=rows, status=status, request_id=request_id))

    @staticmethod
    def _row_id(document: Mapping[str, Any]) -> str:
        metadata = document.get("metadata") or {}
        return "/".join(
            str(part)
            for part in (document.get("kind"), metadata.get("namespace"), metadata.get("name"))
            if part
        )

    def _run_row_action(self, intent: RowActionIntent) -> None:
        if intent.action != VIEW_YAML_ACTION:
            logger.debug("Unknown row action %s", intent.action)
            return
        name = intent.fields.get("name")
        if not name:
            return
        document = self._provider.get_instance(str(name), intent.fields.get("namespace"))
        if document is None:
            error = CatalogError(f"Resource {name} not found", context=dict(intent.fields))
            self._post(error_to_payload(error))
            return
        open_best_effort(self._opener, yaml.safe_dump(document, sort_keys=False), "yaml")
