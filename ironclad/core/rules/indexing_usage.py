"""
Indexing Usage Rule — Detects indexing, slicing, and Index/IndexMut impls.

  container[i]                     -> IndexingOperation
  container[a..b]                  -> SlicingOperation (the same expression
                                      is not reported again as an index)
  m[0][1..]                        -> IndexingOperation for `m[0]` plus the
                                      SlicingOperation
  impl Index<usize> for T { .. }   -> IndexTraitImplementation, anchored on
                                      the impl header
"""

from __future__ import annotations

from ironclad.core.rule_set import Rule
from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, IndexingKind, Severity
from ironclad.models.syntax_models import NodeKind, SyntaxNode


RULE_ID = "security_indexing_usage"

INDEX_TRAITS = {"Index", "IndexMut"}

MESSAGES: dict[IndexingKind, str] = {
    IndexingKind.INDEXING_OPERATION: "usage of indexing operation detected",
    IndexingKind.SLICING_OPERATION: "usage of slicing operation detected",
    IndexingKind.INDEX_TRAIT_IMPLEMENTATION: "implementation of Index/IndexMut trait detected",
}


def trait_base_name(name: str) -> str:
    """`std::ops::Index<usize>` -> `Index`."""
    return name.split("<", 1)[0].rsplit("::", 1)[-1].strip()


def _finding(node: SyntaxNode, kind: IndexingKind) -> list[Finding]:
    return [Finding(rule_id=RULE_ID, span=node.span, message=MESSAGES[kind], tag=kind)]


def check(node: SyntaxNode, context: VisitContext) -> list[Finding]:
    """Detect indexing and slicing expressions and Index trait implementations."""
    if node.kind == NodeKind.INDEX_EXPRESSION:
        # A host that nests the slice's own index node under it reports it once,
        # as the slice. A distinct receiver index (`m[0][1..]`) is still reported.
        if (
            context.is_base_of_parent(NodeKind.SLICE_EXPRESSION)
            and context.parent is not None
            and context.parent.span == node.span
        ):
            return []
        return _finding(node, IndexingKind.INDEXING_OPERATION)

    if node.kind == NodeKind.SLICE_EXPRESSION:
        return _finding(node, IndexingKind.SLICING_OPERATION)

    if node.kind == NodeKind.TRAIT_IMPL_HEADER:
        if trait_base_name(node.name) in INDEX_TRAITS:
            return _finding(node, IndexingKind.INDEX_TRAIT_IMPLEMENTATION)

    return []


RULE = Rule(
    id=RULE_ID,
    default_severity=Severity.DENY,
    interested_kinds=frozenset(
        {
            NodeKind.INDEX_EXPRESSION,
            NodeKind.SLICE_EXPRESSION,
            NodeKind.TRAIT_IMPL_HEADER,
        }
    ),
    detect=check,
    description="Detects usage of indexing and slicing operations.",
)
