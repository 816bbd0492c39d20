"""
Syntax View — Upward context queries handed to rules during traversal.

Rules only ever read the tree. The context exposes the node's parent chain
so a rule can ask questions such as "is this index the base of a slice?"
without walking the host structure itself.
"""

from __future__ import annotations

from typing import Iterator

from ironclad.models.syntax_models import NodeKind, SyntaxNode


class VisitContext:
    """Read-only handle for the node currently being visited."""

    __slots__ = ("node", "unit")

    def __init__(self, node: SyntaxNode, unit: str = "") -> None:
        self.node = node
        self.unit = unit

    @property
    def parent(self) -> SyntaxNode | None:
        return self.node.parent

    def ancestors(self) -> Iterator[SyntaxNode]:
        """Yield the parent chain, nearest first."""
        current = self.node.parent
        while current is not None:
            yield current
            current = current.parent

    def enclosing(self, kind: NodeKind) -> SyntaxNode | None:
        """Nearest enclosing node of `kind`, or None."""
        for ancestor in self.ancestors():
            if ancestor.kind == kind:
                return ancestor
        return None

    def is_within(self, kind: NodeKind) -> bool:
        return self.enclosing(kind) is not None

    def is_base_of_parent(self, kind: NodeKind) -> bool:
        """True if the immediate parent is of `kind` and this node is its first child."""
        parent = self.node.parent
        return (
            parent is not None
            and parent.kind == kind
            and bool(parent.children)
            and parent.children[0] is self.node
        )
