"""
Missing Type Rules — Let bindings and closure parameters without an explicit type.

Two rule ids share this module:
  missing_let_type            : one finding per unannotated let binding
  missing_closure_param_type  : one finding per unannotated closure parameter

Wildcard `_` patterns and macro-expanded or desugared code are not
reported. Async closures are checked like any other closure. Pattern shape
is otherwise irrelevant: an unannotated destructuring binding is still
untyped.
"""

from __future__ import annotations

from ironclad.core.rule_set import Rule
from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, Severity
from ironclad.models.syntax_models import NodeKind, SyntaxNode


LET_RULE_ID = "missing_let_type"
CLOSURE_RULE_ID = "missing_closure_param_type"

LET_MESSAGE = "missing explicit type annotation"
CLOSURE_PARAM_MESSAGE = "closure parameter missing explicit type annotation"


def check_let(node: SyntaxNode, context: VisitContext) -> list[Finding]:
    """Detect a let binding without a type annotation."""
    if node.kind != NodeKind.LET_BINDING:
        return []
    if node.wildcard or node.from_expansion or node.annotated:
        return []
    return [Finding(rule_id=LET_RULE_ID, span=node.span, message=LET_MESSAGE)]


def check_closure(node: SyntaxNode, context: VisitContext) -> list[Finding]:
    """Detect closure parameters without a type annotation, one finding each."""
    if node.kind != NodeKind.CLOSURE:
        return []
    if node.from_expansion:
        return []

    findings: list[Finding] = []
    for param in _parameters(node):
        if param.wildcard or param.annotated:
            continue
        message = CLOSURE_PARAM_MESSAGE
        if param.name:
            message = f"{CLOSURE_PARAM_MESSAGE}: `{param.name}`"
        findings.append(Finding(rule_id=CLOSURE_RULE_ID, span=param.span, message=message))
    return findings


def _parameters(closure: SyntaxNode) -> list[SyntaxNode]:
    return [c for c in closure.children if c.kind == NodeKind.CLOSURE_PARAMETER]


LET_RULE = Rule(
    id=LET_RULE_ID,
    default_severity=Severity.WARN,
    interested_kinds=frozenset({NodeKind.LET_BINDING}),
    detect=check_let,
    description="Detects missing explicit type annotation on let bindings.",
)

CLOSURE_RULE = Rule(
    id=CLOSURE_RULE_ID,
    default_severity=Severity.WARN,
    interested_kinds=frozenset({NodeKind.CLOSURE}),
    detect=check_closure,
    description="Detects missing explicit type annotation on closure parameters.",
)
