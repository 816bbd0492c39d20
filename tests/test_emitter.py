"""
Tests for the diagnostic emitter — ordering, severity resolution, Allow suppression.
"""

from ironclad.core.emitter import CollectingSink, DiagnosticEmitter
from ironclad.core.rule_engine import build_rule_set
from ironclad.models.rule_models import Finding, PanicBackend, Severity
from ironclad.models.syntax_models import Span


def _finding(rule_id, line, column=1, tag=None):
    return Finding(
        rule_id=rule_id,
        span=Span.of(line, column, line, column + 4),
        message=f"{rule_id} at {line}",
        tag=tag,
    )


def test_diagnostics_sorted_by_span():
    findings = [
        _finding("security_panic_usage", 9),
        _finding("security_unsafe_usage", 2),
        _finding("missing_let_type", 5, column=8),
        _finding("missing_let_type", 5, column=3),
    ]
    sink = CollectingSink()
    DiagnosticEmitter(build_rule_set(), sink).emit(findings)
    assert [(d.span.start.line, d.span.start.column) for d in sink.diagnostics] == [
        (2, 1),
        (5, 3),
        (5, 8),
        (9, 1),
    ]


def test_equal_spans_keep_visit_order():
    findings = [_finding("security_unsafe_usage", 1), _finding("security_panic_usage", 1)]
    diagnostics = DiagnosticEmitter(build_rule_set()).resolve(findings)
    assert [d.rule_id for d in diagnostics] == ["security_unsafe_usage", "security_panic_usage"]


def test_severity_resolved_and_tag_carried():
    finding = _finding("security_panic_usage", 3, tag=PanicBackend.EXPECT)
    [diagnostic] = DiagnosticEmitter(build_rule_set()).resolve([finding], unit="lib.rs")
    assert diagnostic.severity == Severity.DENY
    assert diagnostic.tag == PanicBackend.EXPECT
    assert diagnostic.unit == "lib.rs"
    assert diagnostic.render().startswith("lib.rs:3:1-3:5: deny[security_panic_usage]")


def test_allow_produces_no_sink_call():
    rule_set = build_rule_set().disable("security_panic_usage")
    sink = CollectingSink()
    DiagnosticEmitter(rule_set, sink).emit(
        [_finding("security_panic_usage", 1), _finding("security_unsafe_usage", 2)]
    )
    assert [d.rule_id for d in sink.diagnostics] == ["security_unsafe_usage"]


def test_findings_for_unregistered_rules_discarded():
    sink = CollectingSink()
    DiagnosticEmitter(build_rule_set(), sink).emit([_finding("mystery", 1)])
    assert len(sink) == 0


def test_no_sink_still_resolves():
    diagnostics = DiagnosticEmitter(build_rule_set()).emit([_finding("missing_let_type", 1)])
    assert diagnostics[0].severity == Severity.WARN
