"""Syntax facade over tree-sitter nodes.

Every node exposes a kind tag, a line range, a stable identity and an
explicit ``children()`` enumeration. Scoring code reads nodes only through
this interface; it never inspects tree-sitter internals or arbitrary
attributes. Nodes are read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

# Named nodes that carry no structure for scoring.
_SKIPPED_KINDS = frozenset({"comment", "html_comment"})


class SyntaxNode:
    """Read-only view of one tree-sitter node."""

    __slots__ = ("_node",)

    def __init__(self, node: Any) -> None:
        self._node = node

    def __repr__(self) -> str:
        return f"SyntaxNode({self.kind}, lines {self.start_line}-{self.end_line})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, SyntaxNode) and other.node_id == self.node_id

    def __hash__(self) -> int:
        return hash(self.node_id)

    @property
    def kind(self) -> str:
        return self._node.type

    @property
    def node_id(self) -> int:
        """Identity of the node within its tree."""
        return self._node.id

    @property
    def start_line(self) -> int:
        """1-based first line."""
        return self._node.start_point[0] + 1

    @property
    def end_line(self) -> int:
        """1-based last line."""
        return self._node.end_point[0] + 1

    @property
    def text(self) -> str:
        raw = self._node.text
        return raw.decode("utf-8", errors="replace") if raw is not None else ""

    def children(self) -> list[SyntaxNode]:
        """Named, non-comment children in source order."""
        return [
            SyntaxNode(child)
            for child in self._node.children
            if child.is_named and child.type not in _SKIPPED_KINDS
        ]

    def field(self, name: str) -> Optional[SyntaxNode]:
        """Child stored under a grammar field, if any."""
        child = self._node.child_by_field_name(name)
        if child is None or child.type in _SKIPPED_KINDS:
            return None
        return SyntaxNode(child)

    def fields(self, name: str) -> list[SyntaxNode]:
        """All named children stored under a repeated grammar field."""
        return [
            SyntaxNode(child)
            for child in self._node.children_by_field_name(name)
            if child.is_named and child.type not in _SKIPPED_KINDS
        ]

    def token(self, name: str) -> Optional[str]:
        """Kind of a field child that may be an anonymous token (e.g. an operator)."""
        child = self._node.child_by_field_name(name)
        return child.type if child is not None else None

    def first_token(self) -> Optional[str]:
        """Kind of the first child, named or anonymous."""
        children = self._node.children
        return children[0].type if children else None

    def has_token(self, kind: str) -> bool:
        """Whether any direct child, named or anonymous, has this kind."""
        return any(child.type == kind for child in self._node.children)

    def child_of_kind(self, *kinds: str) -> Optional[SyntaxNode]:
        """First named child whose kind is one of ``kinds``."""
        for child in self.children():
            if child.kind in kinds:
                return child
        return None

    def walk(self) -> Iterator[SyntaxNode]:
        """Pre-order traversal of this node and its named descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed source buffer."""

    root: SyntaxNode
    filename: str = "<source>"
    language: str = "typescript"
