"""Tests for directory-backed catalog and instance providers."""

from __future__ import annotations

import pytest

from rb_common.errors import CatalogError, SchemaError
from rb_host.providers import (
    DirectoryCatalogProvider,
    DirectoryInstanceProvider,
    parse_definition,
)


pytestmark = pytest.mark.unit_host


def test_catalog_lists_crds_sorted_by_kind(crd_dir):
    provider = DirectoryCatalogProvider(crd_dir)

    entries = provider.list_entries()

    assert [(e.kind, e.display_key) for e in entries] == [
        ("Gadget", "gadgets.example.com"),
        ("Gizmo", "gizmos.tools.dev"),
        ("Widget", "widgets.example.com"),
    ]
    assert entries[2].description == "Widgets are small parts"


def test_storage_version_wins(crd_dir):
    widget = DirectoryCatalogProvider(crd_dir).find("widgets.example.com")

    assert widget is not None
    assert widget.version == "v1"
    assert widget.api_version == "example.com/v1"


def test_get_schema_returns_open_api_schema(crd_dir):
    schema = DirectoryCatalogProvider(crd_dir).get_schema("Widget")

    assert schema["properties"]["spec"]["required"] == ["size"]


def test_get_schema_errors(crd_dir):
    provider = DirectoryCatalogProvider(crd_dir)

    with pytest.raises(CatalogError):
        provider.get_schema("Nope")
    with pytest.raises(SchemaError):
        provider.get_schema("Gadget")


def test_find_kind_matches_group_and_kind(crd_dir):
    provider = DirectoryCatalogProvider(crd_dir)

    assert provider.find_kind("tools.dev", "Gizmo").display_key == "gizmos.tools.dev"
    assert provider.find_kind("example.com", "Gizmo") is None


def test_missing_directory_raises_catalog_error(tmp_path):
    with pytest.raises(CatalogError):
        DirectoryCatalogProvider(tmp_path / "absent").list_entries()


def test_refresh_picks_up_new_files(crd_dir):
    provider = DirectoryCatalogProvider(crd_dir)
    assert len(provider.list_entries()) == 3

    (crd_dir / "extra.json").write_text(
        '{"kind": "CustomResourceDefinition", "spec": {"group": "x.io", "names": {"kind": "Extra"}}}'
    )
    assert len(provider.list_entries()) == 3
    provider.refresh()

    assert "extra.x.io" in [e.display_key for e in provider.list_entries()]


def test_parse_definition_ignores_other_kinds():
    assert parse_definition({"kind": "ConfigMap", "metadata": {"name": "x"}}) is None


def test_instances_by_namespace(instances_dir):
    provider = DirectoryInstanceProvider(instances_dir)

    assert provider.namespaces() == ["dev", "prod"]
    assert [d["metadata"]["name"] for d in provider.list_instances("prod")] == ["alpha", "gamma"]
    assert len(provider.list_instances()) == 3


def test_get_instance(instances_dir):
    provider = DirectoryInstanceProvider(instances_dir)

    assert provider.get_instance("beta", "dev")["spec"] == {"size": 1}
    assert provider.get_instance("beta", "prod") is None
    assert provider.get_instance("beta", None) is not None


def test_instance_provider_skips_crds_and_filters_kinds(crd_dir, instances_dir):
    assert DirectoryInstanceProvider(crd_dir).list_instances() == []
    assert DirectoryInstanceProvider(instances_dir, kinds=["Gadget"]).list_instances() == []


def test_malformed_crds_are_skipped_or_left_without_schema(shared_kind_dir):
    provider = DirectoryCatalogProvider(shared_kind_dir)

    keys = [e.display_key for e in provider.list_entries()]

    assert keys == ["networks.a.io", "networks.b.io", "odd.c.io"]
    assert provider.find("odd.c.io").schema is None


def test_parse_definition_tolerates_non_mapping_sections():
    assert parse_definition({"kind": "CustomResourceDefinition", "spec": "oops"}) is None
    assert parse_definition({"kind": "CustomResourceDefinition", "spec": {"names": "oops"}}) is None
    definition = parse_definition(
        {
            "kind": "CustomResourceDefinition",
            "spec": {"names": {"kind": "Thing"}, "versions": ["v1", {"name": "v2", "schema": 3}]},
        }
    )
    assert definition.kind == "Thing"
    assert definition.version == "v2"
    assert definition.schema is None


def test_get_schema_by_display_key_when_kinds_collide(shared_kind_dir):
    provider = DirectoryCatalogProvider(shared_kind_dir)

    assert "fromB" in provider.get_schema("networks.b.io")["properties"]
    assert "fromA" in provider.get_schema("networks.a.io")["properties"]
