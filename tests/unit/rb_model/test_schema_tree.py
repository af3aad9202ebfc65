"""Tests for the schema document to tree transformation."""

from __future__ import annotations

import pytest

from rb_model.schema_tree import (
    FALLBACK_SECTION,
    MappingSchema,
    SchemaNode,
    build_tree,
    display_type,
)


pytestmark = pytest.mark.unit_model


def _names(nodes: list[SchemaNode]) -> list[str]:
    return [node.name for node in nodes]


def test_spec_section_marks_required_children():
    schema = {
        "properties": {
            "spec": {
                "type": "object",
                "required": ["x"],
                "properties": {"x": {"type": "string"}},
            }
        }
    }

    tree = build_tree(schema)

    assert _names(tree) == ["spec"]
    spec = tree[0]
    assert spec.node_type == "object"
    assert len(spec.children) == 1
    x = spec.children[0]
    assert x.name == "x"
    assert x.node_type == "string"
    assert x.required is True
    assert x.is_leaf


def test_spec_and_status_sections_keep_fixed_order():
    schema = {
        "required": ["spec"],
        "properties": {
            "status": {"type": "object", "properties": {"ready": {"type": "boolean"}}},
            "spec": {"type": "object", "properties": {"size": {"type": "integer"}}},
        },
    }

    tree = build_tree(schema)

    assert _names(tree) == ["spec", "status"]
    assert tree[0].required is True
    assert tree[1].required is False


def test_array_of_objects_flattens_item_properties():
    schema = {
        "properties": {
            "spec": {
                "properties": {
                    "ports": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["port"],
                            "properties": {"port": {"type": "integer"}, "name": {"type": "string"}},
                        },
                    }
                }
            }
        }
    }

    ports = build_tree(schema)[0].children[0]

    assert ports.node_type == "array"
    assert _names(ports.children) == ["port", "name"]
    assert ports.children[0].required is True
    assert ports.children[1].required is False


def test_array_of_scalars_is_a_leaf():
    schema = {"properties": {"spec": {"properties": {"tags": {"type": "array", "items": {"type": "string"}}}}}}

    tags = build_tree(schema)[0].children[0]

    assert tags.node_type == "array"
    assert tags.is_leaf


def test_document_without_sections_falls_back_to_single_schema_section():
    schema = {"type": "object", "properties": {"name": {"type": "string"}}}

    tree = build_tree(schema)

    assert _names(tree) == [FALLBACK_SECTION]
    assert _names(tree[0].children) == ["name"]


def test_null_section_is_skipped():
    tree = build_tree({"properties": {"spec": None, "status": {"type": "object"}}})

    assert _names(tree) == ["status"]


def test_none_document_yields_no_sections():
    assert build_tree(None) == []


def test_untyped_node_with_properties_reports_object():
    assert display_type(MappingSchema({"properties": {"a": {}}})) == "object"
    assert display_type(MappingSchema({})) == ""
    assert display_type(MappingSchema({"type": ["string", "null"]})) == "string | null"


def test_malformed_property_renders_as_typeless_leaf():
    tree = build_tree({"properties": {"spec": {"properties": {"broken": "not-a-schema"}}}})

    broken = tree[0].children[0]
    assert broken.name == "broken"
    assert broken.node_type == ""
    assert broken.is_leaf
    assert not broken.unrenderable


def test_self_referencing_schema_is_cut_at_the_first_revisit():
    node: dict = {"type": "object", "properties": {}}
    node["properties"]["self"] = node

    tree = build_tree({"properties": {"spec": node}}, max_depth=5)

    spec = tree[0]
    assert [child.name for child in spec.children] == ["self"]
    assert spec.children[0].unrenderable
    assert spec.children[0].is_leaf


def test_branching_cycle_terminates():
    node: dict = {"type": "object", "properties": {}}
    node["properties"]["a"] = node
    node["properties"]["b"] = {"type": "array", "items": node}
    node["properties"]["c"] = {"type": "object", "properties": {"back": node}}

    tree = build_tree({"properties": {"spec": node}})

    spec = tree[0]
    assert [child.name for child in spec.children] == ["a", "b", "c"]
    assert spec.children[0].unrenderable
    assert [child.unrenderable for child in spec.children[1].children] == [True, True, False]
    assert spec.children[2].children[0].unrenderable
    assert sum(1 for _ in spec.walk()) < 20


def test_shared_sibling_schemas_are_not_treated_as_cycles():
    shared = {"type": "string"}
    tree = build_tree({"properties": {"spec": {"properties": {"x": shared, "y": shared}}}})

    assert [child.unrenderable for child in tree[0].children] == [False, False]


def test_depth_bound_cuts_deep_acyclic_schemas():
    schema: dict = {"type": "string"}
    for level in range(10):
        schema = {"type": "object", "properties": {f"l{level}": schema}}

    tree = build_tree({"properties": {"spec": schema}}, max_depth=5)

    depth = 1
    current = tree[0]
    while current.children:
        current = current.children[0]
        depth += 1
    assert current.unrenderable
    assert depth == 6


def test_build_is_deterministic():
    schema = {
        "properties": {
            "spec": {
                "required": ["b"],
                "properties": {"b": {"type": "string"}, "a": {"type": "integer", "description": "an a"}},
            }
        }
    }

    first = [node.to_dict() for node in build_tree(schema)]
    second = [node.to_dict() for node in build_tree(schema)]

    assert first == second
    assert _names(build_tree(schema)[0].children) == ["b", "a"]


def test_walk_yields_paths_depth_first():
    tree = build_tree({"properties": {"spec": {"properties": {"a": {"properties": {"b": {}}}}}}})

    paths = [path for path, _ in tree[0].walk()]

    assert paths == [("spec",), ("spec", "a"), ("spec", "a", "b")]
