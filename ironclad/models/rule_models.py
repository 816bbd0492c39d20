"""
Rule Engine Data Models — Findings, diagnostics, and analysis results.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, Field

from ironclad.models.syntax_models import Span


class Severity(str, Enum):
    ALLOW = "allow"
    WARN = "warn"
    DENY = "deny"

    @classmethod
    def _missing_(cls, value: object) -> Severity | None:
        # Accept "Deny", "WARN", ... as written in lint configuration
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class PanicBackend(str, Enum):
    """Closed taxonomy of the mechanisms a panicking call site routes through."""

    UNWRAP = "Unwrap"
    EXPECT = "Expect"
    BEGIN_PANIC = "BeginPanic"
    PANICKING_MODULE = "PanickingModule"


class IndexingKind(str, Enum):
    INDEXING_OPERATION = "IndexingOperation"
    SLICING_OPERATION = "SlicingOperation"
    INDEX_TRAIT_IMPLEMENTATION = "IndexTraitImplementation"


FindingTag = Union[PanicBackend, IndexingKind]


class Finding(BaseModel):
    """A raw detection produced by a rule, before severity resolution."""

    rule_id: str = Field(..., description="Rule identifier, e.g. 'security_panic_usage'")
    span: Span
    message: str
    tag: FindingTag | None = Field(default=None, description="Rule-specific classification")


class Diagnostic(BaseModel):
    """A finding after severity resolution, ready for the host sink."""

    rule_id: str
    severity: Severity
    span: Span
    message: str
    tag: FindingTag | None = None
    unit: str = Field(default="", description="Compilation unit the diagnostic belongs to")

    def render(self) -> str:
        location = f"{self.unit}:{self.span}" if self.unit else str(self.span)
        return f"{location}: {self.severity.value}[{self.rule_id}]: {self.message}"


class RuleError(BaseModel):
    """A rule that raised while inspecting a node. Never reported as a diagnostic."""

    rule_id: str
    span: Span
    error: str


class AnalysisResult(BaseModel):
    """Result of analysing one compilation unit."""

    unit: str = ""
    diagnostics: list[Diagnostic] = Field(default_factory=list)
    rules_executed: list[str] = Field(default_factory=list)
    nodes_visited: int = 0
    rule_errors: list[RuleError] = Field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def has_denials(self) -> bool:
        """True if the host should treat the run as failed."""
        return any(d.severity == Severity.DENY for d in self.diagnostics)

    def by_rule(self, rule_id: str) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.rule_id == rule_id]
