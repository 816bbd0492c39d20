"""
Ironclad Configuration — pydantic-settings based.

Severity overrides are read from environment variables or a .env file, e.g.

    IRONCLAD_SEVERITY_OVERRIDES='{"security_panic_usage": "warn"}'

Overrides naming a rule id the engine does not know are ignored when the
rule set is built; entries with an unrecognised severity are skipped with a
warning.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ironclad.models.rule_models import Severity

logger = logging.getLogger("ironclad.config")


class Settings(BaseSettings):
    """Process-wide settings sourced from environment variables."""

    # ── Rules ──
    # Raw strings; validated in Configuration.from_settings
    severity_overrides: dict[str, str] = Field(
        default_factory=dict,
        description="Rule id -> severity (allow, warn, deny) applied to every finding of that rule",
    )

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Level for the 'ironclad' logger")

    model_config = SettingsConfigDict(
        env_prefix="IRONCLAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class Configuration(BaseModel):
    """Severity overrides for one analysis invocation."""

    overrides: dict[str, Severity] = Field(default_factory=dict)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> Configuration:
        source = source or settings
        overrides: dict[str, Severity] = {}
        for rule_id, value in source.severity_overrides.items():
            try:
                overrides[rule_id] = Severity(value)
            except ValueError:
                logger.warning(f"Ignoring invalid severity '{value}' for rule '{rule_id}'")
        return cls(overrides=overrides)


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the 'ironclad' logger. For hosts that want one."""
    logger = logging.getLogger("ironclad")
    logger.setLevel((level or settings.log_level).upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)


# Singleton instance, imported by other modules
settings = Settings()
