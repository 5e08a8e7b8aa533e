"""
Library settings for automata.

Manifesto:
    Engine defaults that a host may want to flip without touching code
    (log level, log format, how swallowed handler failures are surfaced)
    come from the environment, validated once and cached.

All fields can be set via ``AUTOMATA_*`` environment variables (e.g.
``AUTOMATA_FAILURE_POLICY=raise``) or a ``.env`` file.

Tags:
    automata, configuration, settings, pydantic, caching

Doc-Types:
    api-reference
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FailurePolicy(str, Enum):
    """What ``advance()`` does with handler failures after reporting them."""

    DISCARD = "discard"  # Report and continue; advance() settles normally
    RAISE = "raise"      # Report, finish the step, then raise StepFailedError


class AutomataSettings(BaseSettings):
    """Automata library configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTOMATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console", description="console or json")

    # ── Engine ───────────────────────────────────────────────────
    failure_policy: FailurePolicy = Field(default=FailurePolicy.DISCARD)

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in {"console", "json"}:
            raise ValueError(f"unknown log format: {value}")
        return value


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, AutomataSettings] = {}


def get_settings(*, _force_reload: bool = False) -> AutomataSettings:
    """Load, validate, and cache an :class:`AutomataSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = AutomataSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings (used by tests)."""
    _settings_cache.clear()


__all__ = [
    "AutomataSettings",
    "FailurePolicy",
    "clear_settings_cache",
    "get_settings",
]
