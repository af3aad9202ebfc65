"""View-side session: the host bridge state machine.

A :class:`ViewSession` owns everything one open view knows about: the catalog
options, the current schema tree, the table state and the status line. It
turns user actions into outbound intents and applies inbound host events,
notifying subscribed renderers after each change.
"""

from __future__ import annotations

import enum
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence, assert_never

from rb_bridge.messages import (
    ClearEvent,
    ErrorEvent,
    InitEvent,
    ReadyIntent,
    ResourceDataEvent,
    ResultsEvent,
    RowActionIntent,
    SelectIntent,
    SetScopeIntent,
    ViewYamlIntent,
    parse_inbound,
)
from rb_common.config.settings import BrowserSettings
from rb_common.errors import ProtocolError
from rb_model.catalog import CatalogEntry, filter_entries, find_entry
from rb_model.schema_tree import SchemaNode, build_tree
from rb_model.table_state import RefreshKind, TableState

logger = logging.getLogger(__name__)

LOADING_STATUS = "Loading..."

PostFn = Callable[[Mapping[str, Any]], None]


class BridgeState(str, enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    LOADING = "loading"
    POPULATED = "populated"


class SessionChange(str, enum.Enum):
    """What a renderer has to refresh after a session update."""

    CATALOG = "catalog"
    LOADING = "loading"
    SCHEMA = "schema"
    TABLE_SHAPE = "table_shape"
    TABLE_ROWS = "table_rows"
    ERROR = "error"


ChangeListener = Callable[[SessionChange], None]


@dataclass(frozen=True)
class RowAction:
    """A row-scoped operation; the emitted intent carries cell values, not indices."""

    name: str
    label: str
    key_columns: tuple[str, ...] = ("name", "namespace")


class ViewSession:
    """State and protocol handling for one open view."""

    def __init__(
        self,
        post: PostFn,
        *,
        settings: BrowserSettings | None = None,
        row_actions: Sequence[RowAction] = (),
    ) -> None:
        self._post = post
        self.settings = settings or BrowserSettings()
        self.row_actions: tuple[RowAction, ...] = tuple(row_actions)

        self.state = BridgeState.UNINITIALIZED
        self.options: list[CatalogEntry] = []
        self.catalog_query = ""
        self.selected: str | None = None
        self.scope: str | None = None

        self.table = TableState()
        self.status = ""
        self.tree: list[SchemaNode] = []
        self.resource_kind: str | None = None
        self.resource_description: str | None = None
        self.raw_text = ""
        self.error: str | None = None

        self._tokens = itertools.count(1)
        self._latest_request_id: int | None = None
        self._listeners: list[ChangeListener] = []

    # Subscription

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self, change: SessionChange) -> None:
        for listener in list(self._listeners):
            listener(change)

    # Outbound

    def _send(self, intent: Any) -> None:
        wire = intent.to_wire()
        logger.debug("-> %s", wire)
        self._post(wire)

    def _next_token(self) -> int | None:
        if not self.settings.track_requests:
            return None
        self._latest_request_id = next(self._tokens)
        return self._latest_request_id

    @property
    def latest_request_id(self) -> int | None:
        return self._latest_request_id

    def start(self) -> None:
        """Announce readiness to the host. Only the first call emits."""
        if self.state is not BridgeState.UNINITIALIZED:
            logger.debug("Session already started (state=%s)", self.state.value)
            return
        self.state = BridgeState.READY
        self._send(ReadyIntent())

    def select(self, name: str) -> None:
        """Request details for one catalog entry; current content is cleared."""
        self.selected = name
        self._enter_loading()
        self._send(SelectIntent(name=name, request_id=self._next_token()))

    def set_scope(self, value: str) -> None:
        """Switch the active scope (e.g. namespace) for tabular results."""
        self.scope = value
        self._enter_loading()
        self._send(SetScopeIntent(value=value, request_id=self._next_token()))

    def view_raw(self, name: str | None = None) -> bool:
        """Ask the host to open the raw document of an entry."""
        target = name or self.selected
        if not target:
            return False
        self._send(ViewYamlIntent(name=target))
        return True

    def trigger_row_action(self, action: RowAction | str, visible_index: int) -> dict[str, Any]:
        """Emit a row action for the ``visible_index``-th visible row.

        The intent carries the row's key cell values so it stays correct after
        re-sorting or re-filtering.
        """
        resolved = self._resolve_action(action)
        visible = self.table.visible_rows()
        row = visible[visible_index]
        fields: dict[str, Any] = {}
        for column in resolved.key_columns:
            if column in self.table.columns:
                idx = self.table.columns.index(column)
                fields[column] = row[idx] if idx < len(row) else None
        self._send(RowActionIntent(action=resolved.name, fields=fields))
        return fields

    def _resolve_action(self, action: RowAction | str) -> RowAction:
        if isinstance(action, RowAction):
            return action
        for candidate in self.row_actions:
            if candidate.name == action:
                return candidate
        raise KeyError(action)

    # Local (no round trip)

    @property
    def visible_options(self) -> list[CatalogEntry]:
        return filter_entries(self.options, self.catalog_query)

    def filter_catalog(self, query: str) -> list[CatalogEntry]:
        """Filter the option list; a single match is selected immediately."""
        self.catalog_query = query
        matches = self.visible_options
        self._notify(SessionChange.CATALOG)
        if len(matches) == 1 and query:
            self.select(matches[0].display_key)
        return matches

    def sort_by(self, column_index: int) -> None:
        if not 0 <= column_index < len(self.table.columns):
            logger.debug("Ignoring sort on unknown column %s", column_index)
            return
        self.table.sort_by(column_index)
        self.status = self.table.status_text()
        self._notify(SessionChange.TABLE_ROWS)

    def set_filter(self, column_index: int, text: str) -> None:
        if not 0 <= column_index < len(self.table.columns):
            logger.debug("Ignoring filter on unknown column %s", column_index)
            return
        self.table.set_filter(column_index, text)
        self.status = self.table.status_text()
        self._notify(SessionChange.TABLE_ROWS)

    def visible_rows(self) -> list[list[Any]]:
        return self.table.visible_rows()

    # Inbound

    def receive(self, payload: Any) -> bool:
        """Apply one host event. Returns False when it was ignored."""
        try:
            event = parse_inbound(payload)
        except ProtocolError as exc:
            logger.warning("Ignoring inbound message: %s (%s)", exc, exc.context)
            return False
        logger.debug("<- %s", event.command)
        if isinstance(event, InitEvent):
            self._apply_init(event)
        elif isinstance(event, ClearEvent):
            self._enter_loading()
        elif isinstance(event, ResultsEvent):
            if self._is_stale(event.request_id):
                return False
            self._apply_results(event)
        elif isinstance(event, ResourceDataEvent):
            if self._is_stale(event.request_id):
                return False
            self._apply_resource(event)
        elif isinstance(event, ErrorEvent):
            if self._is_stale(event.request_id):
                return False
            self._apply_error(event)
        else:
            assert_never(event)
        return True

    def _is_stale(self, request_id: int | None) -> bool:
        if not self.settings.track_requests or request_id is None:
            return False
        if request_id != self._latest_request_id:
            logger.warning(
                "Discarding stale response %s (latest %s)", request_id, self._latest_request_id
            )
            return True
        return False

    def _apply_init(self, event: InitEvent) -> None:
        self.options = list(event.options)
        self.catalog_query = ""
        self._notify(SessionChange.CATALOG)
        if not self.settings.auto_select or not self.options:
            return
        preselected = event.selected_option
        if preselected and find_entry(self.options, preselected) is not None:
            self.select(preselected)
        else:
            self.select(self.options[0].display_key)

    def _enter_loading(self) -> None:
        self.state = BridgeState.LOADING
        self.table.clear()
        self.tree = []
        self.resource_kind = None
        self.resource_description = None
        self.raw_text = ""
        self.error = None
        self.status = LOADING_STATUS
        self._notify(SessionChange.LOADING)

    def _apply_results(self, event: ResultsEvent) -> None:
        kind = self.table.set_columns_and_rows(event.columns, event.rows)
        self.status = event.status or self.table.status_text()
        self.error = None
        self.state = BridgeState.POPULATED
        self._notify(
            SessionChange.TABLE_SHAPE if kind is RefreshKind.SHAPE else SessionChange.TABLE_ROWS
        )

    def _apply_resource(self, event: ResourceDataEvent) -> None:
        self.tree = build_tree(event.details, max_depth=self.settings.max_depth)
        self.resource_kind = event.kind
        self.resource_description = event.description
        self.raw_text = event.raw_text
        self.error = None
        self.status = ""
        self.state = BridgeState.POPULATED
        self._notify(SessionChange.SCHEMA)

    def _apply_error(self, event: ErrorEvent) -> None:
        self.error = event.message
        self.tree = []
        self.table.clear()
        self.status = event.message
        self.state = BridgeState.POPULATED
        self._notify(SessionChange.ERROR)
