"""
Diagnostic Emitter — Resolves severities and forwards diagnostics to the host.

Findings are ordered by span (stable, so ties keep visit order), resolved
against the rule set, and handed to the sink one at a time. Allow-level
findings never reach the sink.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from ironclad.core.rule_set import RuleSet
from ironclad.models.rule_models import Diagnostic, Finding, Severity

logger = logging.getLogger("ironclad.emitter")

# Host-side receiver, called once per emitted diagnostic
DiagnosticSink = Callable[[Diagnostic], None]


class CollectingSink:
    """Sink that keeps every diagnostic it receives, in arrival order."""

    def __init__(self) -> None:
        self.diagnostics: list[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)

    def __len__(self) -> int:
        return len(self.diagnostics)


class DiagnosticEmitter:
    """Turns findings into diagnostics for one compilation unit."""

    def __init__(self, rule_set: RuleSet, sink: DiagnosticSink | None = None) -> None:
        self.rule_set = rule_set
        self.sink = sink

    def resolve(self, findings: Iterable[Finding], unit: str = "") -> list[Diagnostic]:
        """Order findings by span and resolve severities, dropping Allow."""
        ordered = sorted(findings, key=lambda f: f.span.sort_key)
        diagnostics: list[Diagnostic] = []
        for finding in ordered:
            severity = self.rule_set.severity_for(finding.rule_id)
            if severity is None:
                logger.debug(f"Finding for unregistered rule '{finding.rule_id}' discarded")
                continue
            if severity == Severity.ALLOW:
                continue
            diagnostics.append(
                Diagnostic(
                    rule_id=finding.rule_id,
                    severity=severity,
                    span=finding.span,
                    message=finding.message,
                    tag=finding.tag,
                    unit=unit,
                )
            )
        return diagnostics

    def emit(self, findings: Iterable[Finding], unit: str = "") -> list[Diagnostic]:
        diagnostics = self.resolve(findings, unit)
        self.forward(diagnostics)
        return diagnostics

    def forward(self, diagnostics: Iterable[Diagnostic]) -> None:
        if self.sink is None:
            return
        for diagnostic in diagnostics:
            self.sink(diagnostic)
