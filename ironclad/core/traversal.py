"""
Traversal Engine — Single pre-order walk dispatching nodes to rules.

Parent before children, children in source order. Every node reachable from
the root is visited exactly once; kinds no active rule subscribes to are
passed over. The walk never aborts on a malformed tree or a failing rule.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ironclad.core.rule_set import Rule, RuleSet
from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, RuleError
from ironclad.models.syntax_models import NodeKind, SyntaxNode

logger = logging.getLogger("ironclad.traversal")


@dataclass
class TraversalOutcome:
    """Everything one walk produced, in visit order."""

    findings: list[Finding] = field(default_factory=list)
    rule_errors: list[RuleError] = field(default_factory=list)
    nodes_visited: int = 0
    rules_executed: list[str] = field(default_factory=list)


class TraversalEngine:
    """Walks one syntax tree and collects findings from the active rules."""

    def __init__(self, rule_set: RuleSet) -> None:
        self.rule_set = rule_set
        self._active = rule_set.active_rules()
        self._dispatch = self._build_dispatch(self._active)

    @staticmethod
    def _build_dispatch(rules: list[Rule]) -> dict[NodeKind, list[Rule]]:
        dispatch: dict[NodeKind, list[Rule]] = {}
        for rule in rules:
            for kind in rule.interested_kinds:
                if kind == NodeKind.IGNORED:
                    continue
                dispatch.setdefault(kind, []).append(rule)
        return dispatch

    def walk(self, root: SyntaxNode, unit: str = "") -> TraversalOutcome:
        outcome = TraversalOutcome(rules_executed=[rule.id for rule in self._active])
        seen: set[int] = set()
        stack: list[SyntaxNode] = [root]

        while stack:
            node = stack.pop()
            if id(node) in seen:
                logger.debug(f"Node at {node.span} reachable twice; skipping revisit")
                continue
            seen.add(id(node))
            outcome.nodes_visited += 1

            for rule in self._dispatch.get(node.kind, ()):
                self._visit(rule, node, unit, outcome)

            # Reversed so the leftmost child is popped first
            stack.extend(reversed(node.children))

        return outcome

    def _visit(
        self,
        rule: Rule,
        node: SyntaxNode,
        unit: str,
        outcome: TraversalOutcome,
    ) -> None:
        try:
            findings = rule.detect(node, VisitContext(node, unit))
        except Exception as e:
            # Rule failures should not crash the traversal
            logger.warning(
                f"Rule '{rule.id}' failed on {node.kind.value} at {node.span}: {e}",
                exc_info=True,
            )
            outcome.rule_errors.append(
                RuleError(
                    rule_id=rule.id,
                    span=node.span,
                    error=f"{type(e).__name__}: {e}",
                )
            )
            return

        for finding in findings:
            if not node.span.contains(finding.span):
                logger.warning(
                    f"Dropping '{finding.rule_id}' finding at {finding.span}: "
                    f"outside producing node {node.span}"
                )
                continue
            outcome.findings.append(finding)
