"""Tests for protocol message validation."""

from __future__ import annotations

import pytest

from rb_bridge.messages import (
    ErrorEvent,
    InitEvent,
    ResourceDataEvent,
    ResultsEvent,
    RowActionIntent,
    SelectIntent,
    parse_inbound,
    parse_outbound,
)
from rb_common.errors import ProtocolError


pytestmark = pytest.mark.unit_bridge


def test_results_event_parses_with_token():
    event = parse_inbound(
        {"command": "results", "columns": ["a"], "rows": [[1]], "status": "ok", "requestId": 4}
    )

    assert isinstance(event, ResultsEvent)
    assert event.rows == [[1]]
    assert event.request_id == 4


def test_init_accepts_plain_string_options_and_selection():
    event = parse_inbound({"command": "init", "options": ["All Namespaces", "prod"], "selectedOption": "prod"})

    assert isinstance(event, InitEvent)
    assert [o.display_key for o in event.options] == ["All Namespaces", "prod"]
    assert event.selected_option == "prod"


def test_resource_data_accepts_schema_alias():
    event = parse_inbound({"command": "resourceData", "schema": {"type": "object"}, "kind": "Widget"})

    assert isinstance(event, ResourceDataEvent)
    assert event.details == {"type": "object"}
    assert event.raw_text == ""


def test_error_event_accepts_error_alias():
    event = parse_inbound({"command": "error", "error": "boom"})

    assert isinstance(event, ErrorEvent)
    assert event.message == "boom"
    assert event.request_id is None


def test_error_event_carries_request_token():
    event = parse_inbound({"command": "error", "message": "gone", "requestId": 5})

    assert event.request_id == 5
    assert event.to_wire() == {"command": "error", "message": "gone", "requestId": 5}


@pytest.mark.parametrize(
    "payload",
    [
        {"command": "explode"},
        {"command": "results", "columns": ["a"]},
        {"columns": [], "rows": []},
        ["not", "a", "mapping"],
        "results",
    ],
)
def test_desync_raises_protocol_error(payload):
    with pytest.raises(ProtocolError):
        parse_inbound(payload)


def test_outbound_wire_form_uses_camel_case_and_drops_nulls():
    assert SelectIntent(name="widgets.example.com", request_id=3).to_wire() == {
        "command": "select",
        "name": "widgets.example.com",
        "requestId": 3,
    }
    assert SelectIntent(name="x").to_wire() == {"command": "select", "name": "x"}


def test_outbound_round_trip_through_parser():
    wire = RowActionIntent(action="viewYaml", fields={"name": "a", "namespace": "b"}).to_wire()

    intent = parse_outbound(wire)

    assert isinstance(intent, RowActionIntent)
    assert intent.fields == {"name": "a", "namespace": "b"}


def test_inbound_command_is_not_a_valid_intent():
    with pytest.raises(ProtocolError):
        parse_outbound({"command": "results", "columns": [], "rows": []})
