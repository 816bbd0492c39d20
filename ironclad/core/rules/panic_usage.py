"""
Panic Usage Rule — Maps panicking call sites onto a closed backend taxonomy.

Method calls are matched by method name, macro invocations by the last
segment of the unexpanded macro path. The table is a denylist: any other
name produces nothing.

The assert/todo/unimplemented/unreachable family shares one tag because the
macros all lower to the same abort path in the standard library.
"""

from __future__ import annotations

from ironclad.core.rule_set import Rule
from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, PanicBackend, Severity
from ironclad.models.syntax_models import NodeKind, SyntaxNode


RULE_ID = "security_panic_usage"

PANIC_METHODS: dict[str, PanicBackend] = {
    "unwrap": PanicBackend.UNWRAP,
    "expect": PanicBackend.EXPECT,
}

PANIC_MACROS: dict[str, PanicBackend] = {
    "panic": PanicBackend.BEGIN_PANIC,
    "assert": PanicBackend.PANICKING_MODULE,
    "assert_eq": PanicBackend.PANICKING_MODULE,
    "assert_ne": PanicBackend.PANICKING_MODULE,
    "todo": PanicBackend.PANICKING_MODULE,
    "unimplemented": PanicBackend.PANICKING_MODULE,
    "unreachable": PanicBackend.PANICKING_MODULE,
}


def classify(kind: NodeKind, name: str) -> PanicBackend | None:
    """Backend tag for a call site, or None if the name is not panicking."""
    if kind == NodeKind.METHOD_CALL:
        return PANIC_METHODS.get(name)
    if kind == NodeKind.MACRO_INVOCATION:
        # std::panic!, core::assert! -> panic, assert
        bare = name.rsplit("::", 1)[-1].rstrip("!").strip()
        return PANIC_MACROS.get(bare)
    return None


def message_for(backend: PanicBackend) -> str:
    return f"Call to panic backend `{backend.value}` detected."


def check(node: SyntaxNode, context: VisitContext) -> list[Finding]:
    """Detect unwrap/expect calls and panicking macros."""
    backend = classify(node.kind, node.name)
    if backend is None:
        return []
    return [
        Finding(
            rule_id=RULE_ID,
            span=node.span,
            message=message_for(backend),
            tag=backend,
        )
    ]


RULE = Rule(
    id=RULE_ID,
    default_severity=Severity.DENY,
    interested_kinds=frozenset({NodeKind.METHOD_CALL, NodeKind.MACRO_INVOCATION}),
    detect=check,
    description="Detects constructs that may panic at runtime.",
)
