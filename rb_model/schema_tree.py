"""Schema document to tree-of-nodes transformation.

The builder walks any object implementing :class:`SchemaSource`, so it does
not depend on the concrete JSON/YAML representation of the schema. Mapping
documents are wrapped with :class:`MappingSchema`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64
SECTION_NAMES = ("spec", "status")
FALLBACK_SECTION = "schema"
UNRENDERABLE_MARKER = "unrenderable"


class SchemaSource(Protocol):
    """Capabilities the tree builder needs from a schema node."""

    def has_properties(self) -> bool: ...

    def properties(self) -> Iterator[tuple[str, "SchemaSource"]]: ...

    def item_schema(self) -> "SchemaSource | None": ...

    def declared_type(self) -> str: ...

    def description(self) -> str | None: ...

    def required(self) -> Sequence[str]: ...

    def property(self, name: str) -> "SchemaSource | None": ...

    def is_valid(self) -> bool: ...


class MappingSchema:
    """SchemaSource over a decoded JSON/YAML mapping.

    Non-mapping values are tolerated and behave like an empty schema that
    reports ``is_valid() == False``.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    @property
    def raw(self) -> Any:
        return self._raw

    def is_valid(self) -> bool:
        return isinstance(self._raw, Mapping)

    def _get(self, key: str) -> Any:
        if isinstance(self._raw, Mapping):
            return self._raw.get(key)
        return None

    def _property_map(self) -> Mapping[str, Any] | None:
        props = self._get("properties")
        return props if isinstance(props, Mapping) else None

    def has_properties(self) -> bool:
        return bool(self._property_map())

    def properties(self) -> Iterator[tuple[str, "SchemaSource"]]:
        props = self._property_map() or {}
        for key, value in props.items():
            yield str(key), MappingSchema(value)

    def property(self, name: str) -> "SchemaSource | None":
        props = self._property_map()
        if props is None or props.get(name) is None:
            return None
        return MappingSchema(props[name])

    def item_schema(self) -> "SchemaSource | None":
        items = self._get("items")
        if isinstance(items, Mapping):
            return MappingSchema(items)
        return None

    def declared_type(self) -> str:
        value = self._get("type")
        if isinstance(value, str):
            return value
        # JSON Schema allows a list of types, e.g. ["string", "null"].
        if isinstance(value, (list, tuple)):
            return " | ".join(str(item) for item in value if item is not None)
        return ""

    def description(self) -> str | None:
        value = self._get("description")
        if value is None:
            return None
        return str(value)

    def required(self) -> Sequence[str]:
        value = self._get("required")
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        return []


@dataclass
class SchemaNode:
    """One entry of the rendered schema tree."""

    name: str
    node_type: str = ""
    description: str | None = None
    required: bool = False
    children: list["SchemaNode"] = field(default_factory=list)
    marker: str | None = None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def unrenderable(self) -> bool:
        return self.marker == UNRENDERABLE_MARKER

    def walk(self, path: tuple[str, ...] = ()) -> Iterator[tuple[tuple[str, ...], "SchemaNode"]]:
        """Yield ``(path, node)`` pairs depth-first, this node first."""
        own_path = path + (self.name,)
        yield own_path, self
        for child in self.children:
            yield from child.walk(own_path)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.node_type,
            "required": self.required,
            "children": [child.to_dict() for child in self.children],
        }
        if self.description is not None:
            data["description"] = self.description
        if self.marker is not None:
            data["marker"] = self.marker
        return data


def _as_source(document: Any) -> SchemaSource:
    if isinstance(document, MappingSchema):
        return document
    if isinstance(document, Mapping) or document is None:
        return MappingSchema(document)
    if all(
        hasattr(document, attr)
        for attr in ("has_properties", "properties", "item_schema", "declared_type")
    ):
        return document
    return MappingSchema(document)


def display_type(source: SchemaSource) -> str:
    """Return the badge text for a node: declared type, "object", or ""."""
    declared = source.declared_type()
    if declared:
        return declared
    if source.has_properties():
        return "object"
    return ""


def _unrenderable(name: str, required: bool) -> SchemaNode:
    return SchemaNode(name=name, required=required, marker=UNRENDERABLE_MARKER)


def _identity(source: SchemaSource) -> int:
    return id(getattr(source, "raw", source))


def _build_children(
    source: SchemaSource,
    *,
    depth: int,
    max_depth: int,
    ancestors: frozenset[int],
) -> list[SchemaNode]:
    required = set(source.required())
    return [
        _build_node(
            name, child, name in required, depth=depth, max_depth=max_depth, ancestors=ancestors
        )
        for name, child in source.properties()
    ]


def _build_node(
    name: str,
    source: SchemaSource,
    required: bool,
    *,
    depth: int,
    max_depth: int,
    ancestors: frozenset[int] = frozenset(),
) -> SchemaNode:
    if depth > max_depth:
        logger.warning("Schema nesting exceeds %d levels at %r", max_depth, name)
        return _unrenderable(name, required)
    if not source.is_valid():
        # Malformed nodes render as typeless leaves.
        return SchemaNode(name=name, required=required)
    key = _identity(source)
    if key in ancestors:
        logger.warning("Schema node %r refers back to one of its ancestors", name)
        return _unrenderable(name, required)

    node = SchemaNode(
        name=name,
        node_type=display_type(source),
        description=source.description(),
        required=required,
    )
    path = ancestors | {key}
    if source.has_properties():
        node.children = _build_children(
            source, depth=depth + 1, max_depth=max_depth, ancestors=path
        )
    else:
        items = source.item_schema()
        if items is not None and items.is_valid() and items.has_properties():
            # Array of objects: the item's properties hang directly off this node.
            node.children = _build_children(
                items, depth=depth + 1, max_depth=max_depth, ancestors=path | {_identity(items)}
            )
    return node


def build_tree(document: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> list[SchemaNode]:
    """Build the top-level sections of a schema tree.

    Documents exposing ``spec`` and/or ``status`` properties produce one
    section per present name (in that order). Anything else is wrapped in a
    single ``schema`` section. ``None`` yields no sections.
    """
    if document is None:
        return []
    source = _as_source(document)
    root_required = set(source.required())
    root = frozenset({_identity(source)})
    sections: list[SchemaNode] = []
    for section in SECTION_NAMES:
        child = source.property(section)
        if child is None:
            continue
        sections.append(
            _build_node(
                section,
                child,
                section in root_required,
                depth=1,
                max_depth=max_depth,
                ancestors=root,
            )
        )
    if sections:
        return sections
    return [_build_node(FALLBACK_SECTION, source, False, depth=1, max_depth=max_depth)]
