"""Collapsible rendering of a schema tree.

Expand/collapse state is local to the view and keyed by each node's path of
names from its section. Loading new nodes discards that state: sections
start expanded and everything below starts collapsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from rich.text import Text
from rich.tree import Tree

from rb_bridge.session import SessionChange, ViewSession
from rb_model.schema_tree import SchemaNode
from rb_ui.tui.core import theme

NodePath = tuple[str, ...]


def _split_path(text: str, separator: str) -> tuple[list[str], bool]:
    parts: list[str] = []
    current: list[str] = []
    quoted = escaped = split = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == separator and not quoted:
            parts.append("".join(current))
            current = []
            split = True
        else:
            current.append(char)
    if escaped:
        current.append("\\")
    parts.append("".join(current))
    return [part for part in parts if part], split


def parse_path(text: str) -> NodePath:
    """Turn ``spec/foo/bar`` or ``spec.foo.bar`` into a node path.

    ``/`` wins when it appears outside quotes. Keys containing a separator
    are written as a double-quoted segment (``spec/"example.com/name"``) or
    with backslash escapes (``spec.example\\.com``).
    """
    text = text.strip()
    parts, split = _split_path(text, "/")
    if not split:
        parts, _ = _split_path(text, ".")
    return tuple(parts)


@dataclass(frozen=True)
class TreeRow:
    """One visible line of the rendered tree."""

    path: NodePath
    node: SchemaNode
    expanded: bool

    @property
    def depth(self) -> int:
        return len(self.path) - 1


class SchemaTreeView:
    def __init__(self, nodes: Sequence[SchemaNode] = ()) -> None:
        self._nodes: list[SchemaNode] = []
        self._expanded: set[NodePath] = set()
        self.load(nodes)

    @property
    def nodes(self) -> list[SchemaNode]:
        return self._nodes

    def bind(self, session: ViewSession) -> None:
        """Reload from the session whenever it receives new schema content."""

        def _on_change(change: SessionChange) -> None:
            if change in (SessionChange.SCHEMA, SessionChange.LOADING, SessionChange.ERROR):
                self.load(session.tree)

        session.subscribe(_on_change)
        self.load(session.tree)

    def load(self, nodes: Sequence[SchemaNode]) -> None:
        self._nodes = list(nodes)
        self._expanded = {(node.name,) for node in self._nodes}

    def _iter_all(self) -> Iterator[tuple[NodePath, SchemaNode]]:
        for node in self._nodes:
            yield from node.walk()

    def find(self, path: NodePath) -> SchemaNode | None:
        level: Sequence[SchemaNode] = self._nodes
        found: SchemaNode | None = None
        for name in path:
            found = next((node for node in level if node.name == name), None)
            if found is None:
                return None
            level = found.children
        return found

    def is_expanded(self, path: NodePath) -> bool:
        return tuple(path) in self._expanded

    def expand(self, path: NodePath, *, reveal: bool = True) -> bool:
        """Expand a node; with ``reveal`` its ancestors are expanded as well."""
        path = tuple(path)
        if self.find(path) is None:
            return False
        self._expanded.add(path)
        if reveal:
            for end in range(1, len(path)):
                self._expanded.add(path[:end])
        return True

    def collapse(self, path: NodePath) -> bool:
        path = tuple(path)
        if self.find(path) is None:
            return False
        self._expanded.discard(path)
        return True

    def toggle(self, path: NodePath) -> bool:
        if self.is_expanded(path):
            return self.collapse(path)
        return self.expand(path, reveal=False)

    def expand_all(self) -> None:
        self._expanded = {path for path, _ in self._iter_all()}

    def collapse_all(self) -> None:
        self._expanded = set()

    def visible_rows(self) -> list[TreeRow]:
        rows: list[TreeRow] = []

        def _visit(node: SchemaNode, parent: NodePath) -> None:
            path = parent + (node.name,)
            expanded = path in self._expanded
            rows.append(TreeRow(path=path, node=node, expanded=expanded))
            if expanded:
                for child in node.children:
                    _visit(child, path)

        for node in self._nodes:
            _visit(node, ())
        return rows

    def label(self, node: SchemaNode, expanded: bool) -> Text:
        has_detail = bool(node.children or node.description)
        if not has_detail:
            glyph = theme.TREE_LEAF_GLYPH
        else:
            glyph = theme.TREE_EXPANDED_GLYPH if expanded else theme.TREE_COLLAPSED_GLYPH
        text = Text(f"{glyph} ")
        text.append(node.name, style=theme.TREE_NAME_STYLE)
        if node.required:
            text.append(" required", style=theme.TREE_REQUIRED_STYLE)
        if node.unrenderable:
            text.append(f" {node.marker}", style=theme.TREE_UNRENDERABLE_STYLE)
        elif node.node_type:
            text.append(f" {node.node_type}", style=theme.TREE_TYPE_STYLE)
        if expanded and node.description:
            text.append(f"\n{node.description}", style=theme.TREE_DESCRIPTION_STYLE)
        return text

    def render(self, title: str = "Schema") -> Tree:
        tree = Tree(Text(title, style=theme.RICH_ACCENT_BOLD), guide_style=theme.RICH_BORDER_STYLE)

        def _attach(parent: Tree, node: SchemaNode, parent_path: NodePath) -> None:
            path = parent_path + (node.name,)
            expanded = path in self._expanded
            branch = parent.add(self.label(node, expanded))
            if expanded:
                for child in node.children:
                    _attach(branch, child, path)

        for node in self._nodes:
            _attach(tree, node, ())
        return tree
