"""
Unsafe Usage Rule — Reports every unsafe surface independently.

An `unsafe fn` containing an `unsafe {}` block yields two findings, one for
the signature and one for the block. Nested unsafe blocks each report.
"""

from __future__ import annotations

from ironclad.core.rule_set import Rule
from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, Severity
from ironclad.models.syntax_models import NodeKind, SyntaxNode


RULE_ID = "security_unsafe_usage"

MESSAGES: dict[NodeKind, str] = {
    NodeKind.FUNCTION_ITEM: "unsafe function detected",
    NodeKind.TRAIT_ITEM: "unsafe trait detected",
    NodeKind.IMPL_ITEM: "unsafe implementation detected",
    NodeKind.UNSAFE_BLOCK: "usage of unsafe block detected",
}


def check(node: SyntaxNode, context: VisitContext) -> list[Finding]:
    """Detect unsafe functions, traits, implementations and blocks."""
    message = MESSAGES.get(node.kind)
    if message is None:
        return []
    # Blocks are unsafe by kind; items only when declared so
    if node.kind != NodeKind.UNSAFE_BLOCK and not node.unsafe:
        return []
    return [Finding(rule_id=RULE_ID, span=node.span, message=message)]


RULE = Rule(
    id=RULE_ID,
    default_severity=Severity.DENY,
    interested_kinds=frozenset(MESSAGES),
    detect=check,
    description=(
        "Detects usage of unsafe blocks, unsafe functions, unsafe traits "
        "and unsafe implementations."
    ),
)
