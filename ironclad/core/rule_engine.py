"""
Rule Engine — Orchestrates traversal, rules and diagnostic emission.

One call analyses one compilation unit: walk the tree once with the active
rules, order and resolve the findings, forward them to the host sink.
Deterministic: no I/O, no shared mutable state, no randomness.
"""

from __future__ import annotations

import logging
import time

from ironclad.config import Configuration
from ironclad.core.emitter import DiagnosticEmitter, DiagnosticSink
from ironclad.core.rule_set import Rule, RuleSet
from ironclad.core.syntax_builder import parse_rust
from ironclad.core.syntax_view import VisitContext
from ironclad.core.traversal import TraversalEngine
from ironclad.models.rule_models import AnalysisResult, Finding
from ironclad.models.syntax_models import SyntaxNode

# Import all rule modules
from ironclad.core.rules import (
    indexing_usage,
    missing_type,
    panic_usage,
    unsafe_usage,
)

logger = logging.getLogger("ironclad.engine")

# Registry of all built-in rules, in emission tie-break order
RULE_REGISTRY: dict[str, Rule] = {
    missing_type.LET_RULE_ID: missing_type.LET_RULE,
    missing_type.CLOSURE_RULE_ID: missing_type.CLOSURE_RULE,
    unsafe_usage.RULE_ID: unsafe_usage.RULE,
    panic_usage.RULE_ID: panic_usage.RULE,
    indexing_usage.RULE_ID: indexing_usage.RULE,
}


def build_rule_set(configuration: Configuration | None = None) -> RuleSet:
    """Rule set of every built-in rule with `configuration` overrides applied."""
    overrides = configuration.overrides if configuration else {}
    return RuleSet(RULE_REGISTRY.values(), overrides)


class RuleEngine:
    """
    Deterministic rule engine.

    Holds an immutable rule set; `run` may be called repeatedly and from
    several threads at once.
    """

    def __init__(self, rule_set: RuleSet | None = None) -> None:
        self.rule_set = rule_set if rule_set is not None else build_rule_set()
        self._traversal = TraversalEngine(self.rule_set)

    def collect(self, root: SyntaxNode, unit: str = "") -> AnalysisResult:
        """Walk `root` and resolve diagnostics without calling any sink."""
        start = time.monotonic()
        outcome = self._traversal.walk(root, unit)
        diagnostics = DiagnosticEmitter(self.rule_set).resolve(outcome.findings, unit)
        elapsed = (time.monotonic() - start) * 1000

        if outcome.rule_errors:
            logger.warning(
                f"{len(outcome.rule_errors)} rule error(s) while analysing '{unit or '<unit>'}'"
            )
        logger.debug(
            f"Analysed '{unit or '<unit>'}': {outcome.nodes_visited} nodes, "
            f"{len(diagnostics)} diagnostics"
        )

        return AnalysisResult(
            unit=unit,
            diagnostics=diagnostics,
            rules_executed=outcome.rules_executed,
            nodes_visited=outcome.nodes_visited,
            rule_errors=outcome.rule_errors,
            duration_ms=round(elapsed, 2),
        )

    def run(
        self,
        root: SyntaxNode,
        sink: DiagnosticSink | None = None,
        unit: str = "",
    ) -> AnalysisResult:
        """
        Analyse one compilation unit.

        Args:
            root: Root of the host-supplied syntax tree.
            sink: Called once per diagnostic, in ascending span order.
            unit: Name of the compilation unit, copied onto each diagnostic.

        Returns:
            AnalysisResult with the emitted diagnostics.
        """
        result = self.collect(root, unit)
        DiagnosticEmitter(self.rule_set, sink).forward(result.diagnostics)
        return result

    def run_source(
        self,
        source: str,
        sink: DiagnosticSink | None = None,
        unit: str = "",
    ) -> AnalysisResult:
        """Parse Rust `source` with tree-sitter and analyse it."""
        return self.run(parse_rust(source), sink, unit)

    def run_single_rule(self, rule_id: str, root: SyntaxNode) -> list[Finding]:
        """Run one rule over every node of `root`, ignoring severities."""
        rule = self.rule_set.get(rule_id)
        if rule is None:
            raise ValueError(f"Unknown rule: {rule_id}")
        findings: list[Finding] = []
        for node in root.walk():
            if rule.is_interested(node.kind):
                findings.extend(rule.detect(node, VisitContext(node)))
        return findings


def analyze(
    root: SyntaxNode,
    configuration: Configuration | None = None,
    sink: DiagnosticSink | None = None,
    unit: str = "",
) -> AnalysisResult:
    """Analyse `root` with the built-in rules."""
    return RuleEngine(build_rule_set(configuration)).run(root, sink, unit)
