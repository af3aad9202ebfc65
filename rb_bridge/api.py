"""Public API surface for the bridge layer."""

from rb_bridge.channel import ChannelEndpoint, LoopbackChannel
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
    parse_outbound,
)
from rb_bridge.session import (
    BridgeState,
    RowAction,
    SessionChange,
    ViewSession,
)

__all__ = [
    "BridgeState",
    "ChannelEndpoint",
    "ClearEvent",
    "ErrorEvent",
    "InitEvent",
    "LoopbackChannel",
    "ReadyIntent",
    "ResourceDataEvent",
    "ResultsEvent",
    "RowAction",
    "RowActionIntent",
    "SelectIntent",
    "SessionChange",
    "SetScopeIntent",
    "ViewSession",
    "ViewYamlIntent",
    "parse_inbound",
    "parse_outbound",
]
