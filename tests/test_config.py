"""
Tests for settings and configuration loading.
"""

import logging

from ironclad.config import Configuration, Settings, configure_logging
from ironclad.core.rule_engine import build_rule_set
from ironclad.models.rule_models import Severity


def test_defaults(monkeypatch):
    monkeypatch.delenv("IRONCLAD_SEVERITY_OVERRIDES", raising=False)
    settings = Settings(_env_file=None)
    assert settings.severity_overrides == {}
    assert settings.log_level == "INFO"


def test_overrides_from_environment(monkeypatch):
    monkeypatch.setenv(
        "IRONCLAD_SEVERITY_OVERRIDES",
        '{"security_panic_usage": "warn", "unknown_rule": "deny"}',
    )
    settings = Settings(_env_file=None)
    assert settings.severity_overrides["security_panic_usage"] == "warn"

    configuration = Configuration.from_settings(settings)
    rule_set = build_rule_set(configuration)
    assert rule_set.severity_for("security_panic_usage") == Severity.WARN
    # Unknown ids are dropped, not fatal
    assert "unknown_rule" not in rule_set.overrides


def test_invalid_severity_skipped_not_fatal(monkeypatch, caplog):
    monkeypatch.setenv(
        "IRONCLAD_SEVERITY_OVERRIDES",
        '{"security_panic_usage": "bogus", "security_unsafe_usage": "WARN"}',
    )
    settings = Settings(_env_file=None)
    assert settings.severity_overrides["security_panic_usage"] == "bogus"

    with caplog.at_level(logging.WARNING, logger="ironclad.config"):
        configuration = Configuration.from_settings(settings)
    assert configuration.overrides == {"security_unsafe_usage": Severity.WARN}
    assert "bogus" in caplog.text

    rule_set = build_rule_set(configuration)
    assert rule_set.severity_for("security_panic_usage") == Severity.DENY


def test_configure_logging_attaches_one_handler():
    logger = logging.getLogger("ironclad")
    before = list(logger.handlers)
    try:
        configure_logging("debug")
        configure_logging("debug")
        assert len(logger.handlers) == max(len(before), 1)
        assert logger.level == logging.DEBUG
    finally:
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
