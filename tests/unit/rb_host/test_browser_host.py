"""Tests for the resource-type browser host."""

from __future__ import annotations

import pytest
import yaml

from rb_bridge.session import BridgeState
from rb_host.browser_host import ResourceBrowserHost, metadata_yaml
from rb_host.documents import RecordingDocumentOpener
from rb_host.providers import DirectoryCatalogProvider
from rb_ui.wiring.dependencies import build_browser_bundle


pytestmark = pytest.mark.unit_host


@pytest.fixture
def sent() -> list[dict]:
    return []


def _host(crd_dir, sent, **kwargs) -> ResourceBrowserHost:
    return ResourceBrowserHost(sent.append, DirectoryCatalogProvider(crd_dir), **kwargs)


def test_ready_sends_catalog(crd_dir, sent):
    _host(crd_dir, sent).handle({"command": "ready"})

    assert sent[0]["command"] == "init"
    assert [o["displayKey"] for o in sent[0]["options"]] == [
        "gadgets.example.com",
        "gizmos.tools.dev",
        "widgets.example.com",
    ]
    assert "selectedOption" not in sent[0]


def test_ready_preselects_target(crd_dir, sent):
    _host(crd_dir, sent, target=("example.com", "Widget")).handle({"command": "ready"})

    assert sent[0]["selectedOption"] == "widgets.example.com"


def test_select_sends_resource_data_with_token(crd_dir, sent):
    _host(crd_dir, sent).handle({"command": "select", "name": "widgets.example.com", "requestId": 7})

    event = sent[0]
    assert event["command"] == "resourceData"
    assert event["kind"] == "Widget"
    assert event["requestId"] == 7
    assert event["details"]["properties"]["spec"]["required"] == ["size"]
    assert yaml.safe_load(event["rawText"]) == {"apiVersion": "example.com/v1", "kind": "Widget"}


def test_unknown_selection_is_an_error(crd_dir, sent):
    _host(crd_dir, sent).handle({"command": "select", "name": "X"})

    assert sent == [{"command": "error", "message": "Unknown resource type: X"}]


def test_missing_schema_is_an_error(crd_dir, sent):
    _host(crd_dir, sent).handle({"command": "select", "name": "gadgets.example.com"})

    assert sent[0]["command"] == "error"


def test_missing_directory_reports_error_on_ready(tmp_path, sent):
    _host(tmp_path / "absent", sent).handle({"command": "ready"})

    assert sent == [{"command": "error", "message": "Manifest directory not found"}]


def test_view_yaml_opens_schema(crd_dir, sent):
    opener = RecordingDocumentOpener()

    _host(crd_dir, sent, opener=opener).handle({"command": "viewYaml", "name": "gizmos.tools.dev"})

    assert sent == []
    assert opener.opened[0].language == "yaml"
    assert yaml.safe_load(opener.opened[0].text)["properties"]["name"] == {"type": "string"}


def test_malformed_intent_is_ignored(crd_dir, sent):
    host = _host(crd_dir, sent)

    host.handle({"command": "select"})
    host.handle("ready")
    host.handle({"command": "setScope", "value": "prod"})

    assert sent == []


def test_metadata_yaml_keeps_key_order():
    assert metadata_yaml("example.com/v1", "Widget") == "apiVersion: example.com/v1\nkind: Widget\n"


def test_session_and_host_round_trip(crd_dir):
    bundle = build_browser_bundle(DirectoryCatalogProvider(crd_dir), target=("example.com", "Widget"))

    bundle.start()
    session = bundle.session

    assert session.state is BridgeState.POPULATED
    assert session.selected == "widgets.example.com"
    assert [node.name for node in session.tree] == ["spec", "status"]
    spec = session.tree[0]
    assert [child.name for child in spec.children] == ["size", "color", "ports"]
    assert spec.children[0].required is True
    assert [child.name for child in spec.children[2].children] == ["port", "protocol"]
    assert session.resource_description == "Widgets are small parts"


def test_select_serves_schema_of_the_chosen_group_when_kinds_collide(shared_kind_dir, sent):
    _host(shared_kind_dir, sent).handle({"command": "select", "name": "networks.b.io"})

    assert sent[0]["command"] == "resourceData"
    assert list(sent[0]["details"]["properties"]) == ["fromB"]
    assert yaml.safe_load(sent[0]["rawText"])["apiVersion"] == "b.io/v1"


def test_malformed_crds_do_not_block_the_catalog(shared_kind_dir, sent):
    host = _host(shared_kind_dir, sent)

    host.handle({"command": "ready"})
    host.handle({"command": "select", "name": "odd.c.io", "requestId": 4})

    assert sent[0]["command"] == "init"
    assert [o["displayKey"] for o in sent[0]["options"]] == ["networks.a.io", "networks.b.io", "odd.c.io"]
    assert sent[1]["command"] == "error"
    assert sent[1]["requestId"] == 4
