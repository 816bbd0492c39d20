"""
Syntax Data Models — Read-only view over the host-supplied syntax tree.

The host owns the tree for the duration of one analysis pass. Only the node
categories the rules care about get their own kind; everything else the host
produces is carried as NodeKind.IGNORED so parent links stay accurate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from pydantic import BaseModel, ConfigDict


class NodeKind(str, Enum):
    """Closed set of node categories the engine dispatches on."""

    LET_BINDING = "let_binding"
    CLOSURE = "closure"
    CLOSURE_PARAMETER = "closure_parameter"
    FUNCTION_ITEM = "function_item"
    TRAIT_ITEM = "trait_item"
    IMPL_ITEM = "impl_item"
    UNSAFE_BLOCK = "unsafe_block"
    MACRO_INVOCATION = "macro_invocation"
    METHOD_CALL = "method_call"
    INDEX_EXPRESSION = "index_expression"
    SLICE_EXPRESSION = "slice_expression"
    TRAIT_IMPL_HEADER = "trait_impl_header"
    IGNORED = "ignored"

    @classmethod
    def from_host(cls, value: str) -> NodeKind:
        """Map a host kind name onto the closed set; unknown names are ignored."""
        try:
            return cls(value)
        except ValueError:
            return cls.IGNORED


class Position(BaseModel):
    """A source location: 1-based line and column."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int

    @property
    def key(self) -> tuple[int, int]:
        return (self.line, self.column)


class Span(BaseModel):
    """Start/end source locations of a node or finding."""

    model_config = ConfigDict(frozen=True)

    start: Position
    end: Position

    @classmethod
    def of(cls, start_line: int, start_column: int, end_line: int, end_column: int) -> Span:
        return cls(
            start=Position(line=start_line, column=start_column),
            end=Position(line=end_line, column=end_column),
        )

    @property
    def sort_key(self) -> tuple[int, int, int, int]:
        return (*self.start.key, *self.end.key)

    def contains(self, other: Span) -> bool:
        """True if `other` lies within this span (bounds inclusive)."""
        return self.start.key <= other.start.key and other.end.key <= self.end.key

    def __str__(self) -> str:
        return (
            f"{self.start.line}:{self.start.column}-"
            f"{self.end.line}:{self.end.column}"
        )


@dataclass(eq=False)
class SyntaxNode:
    """
    A single node of the host tree.

    Children are owned by their parent; `parent` is a non-owning back
    reference used for context queries. Equality is identity: two nodes with
    the same shape at different places in the tree are different nodes.

    The boolean facts are resolved by the host:
      annotated      : an explicit type annotation is attached
      unsafe         : the item is declared `unsafe`
      wildcard       : the binding pattern is `_`
      from_expansion : the node comes from a macro expansion or desugaring
    """

    kind: NodeKind
    span: Span
    name: str = ""
    annotated: bool = False
    unsafe: bool = False
    wildcard: bool = False
    from_expansion: bool = False
    children: list[SyntaxNode] = field(default_factory=list, repr=False)
    parent: SyntaxNode | None = field(default=None, repr=False)

    def add_child(self, child: SyntaxNode) -> SyntaxNode:
        """Attach `child` as the last child and link it back to this node."""
        child.parent = self
        self.children.append(child)
        return child

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield this node and all descendants in pre-order."""
        stack: list[SyntaxNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
