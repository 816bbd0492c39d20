"""
Rule Set — Ordered, deduplicated, immutable collection of rules.

A rule set is built once per analysis invocation and handed to the traversal
engine; it is never mutated afterwards, so one instance can be shared by
traversals running in parallel. Severity overrides resolve per rule id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Iterator, Mapping

from ironclad.core.syntax_view import VisitContext
from ironclad.models.rule_models import Finding, Severity
from ironclad.models.syntax_models import NodeKind, SyntaxNode

logger = logging.getLogger("ironclad.rule_set")

# Type for a rule detect function
DetectFn = Callable[[SyntaxNode, VisitContext], list[Finding]]


@dataclass(frozen=True)
class Rule:
    """A named detector subscribed to a set of node kinds."""

    id: str
    default_severity: Severity
    interested_kinds: frozenset[NodeKind]
    detect: DetectFn
    description: str = ""

    def is_interested(self, kind: NodeKind) -> bool:
        return kind in self.interested_kinds


class RuleSet:
    """
    Immutable rule collection with per-rule severity overrides.

    Rules keep their registration order; a second rule with an id already
    present is dropped. Overrides for rule ids not in the set are ignored.
    """

    def __init__(
        self,
        rules: Iterable[Rule],
        overrides: Mapping[str, Severity] | None = None,
    ) -> None:
        unique: dict[str, Rule] = {}
        for rule in rules:
            if rule.id in unique:
                logger.debug(f"Duplicate rule '{rule.id}' dropped")
                continue
            unique[rule.id] = rule
        self._rules: tuple[Rule, ...] = tuple(unique.values())

        resolved: dict[str, Severity] = {}
        for rule_id, severity in (overrides or {}).items():
            if rule_id not in unique:
                logger.warning(f"Ignoring severity override for unknown rule '{rule_id}'")
                continue
            resolved[rule_id] = Severity(severity)
        self._overrides = MappingProxyType(resolved)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return any(rule.id == rule_id for rule in self._rules)

    @property
    def rule_ids(self) -> list[str]:
        return [rule.id for rule in self._rules]

    @property
    def overrides(self) -> Mapping[str, Severity]:
        return self._overrides

    def get(self, rule_id: str) -> Rule | None:
        for rule in self._rules:
            if rule.id == rule_id:
                return rule
        return None

    def severity_for(self, rule_id: str) -> Severity | None:
        """Configured severity for `rule_id`, falling back to the rule default."""
        if rule_id in self._overrides:
            return self._overrides[rule_id]
        rule = self.get(rule_id)
        return rule.default_severity if rule else None

    def is_enabled(self, rule_id: str) -> bool:
        severity = self.severity_for(rule_id)
        return severity is not None and severity != Severity.ALLOW

    def active_rules(self) -> list[Rule]:
        """Rules that can produce a sink call, in registration order."""
        return [rule for rule in self._rules if self.is_enabled(rule.id)]

    def with_overrides(self, overrides: Mapping[str, Severity]) -> RuleSet:
        """Return a new rule set with `overrides` layered over the current ones."""
        merged = {**self._overrides, **overrides}
        return RuleSet(self._rules, merged)

    def disable(self, *rule_ids: str) -> RuleSet:
        return self.with_overrides({rule_id: Severity.ALLOW for rule_id in rule_ids})

    def enable(self, *rule_ids: str, severity: Severity | None = None) -> RuleSet:
        """Re-enable rules at `severity`, or at their default when omitted."""
        merged = dict(self._overrides)
        for rule_id in rule_ids:
            if severity is None:
                merged.pop(rule_id, None)
            else:
                merged[rule_id] = severity
        return RuleSet(self._rules, merged)
