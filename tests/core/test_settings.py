"""Tests for automata.core.settings.

Covers:
- Defaults
- AUTOMATA_* environment overrides
- Validation of level / format / policy
- Caching and forced reload
"""

import pytest
from pydantic import ValidationError

from automata.core.settings import AutomataSettings, FailurePolicy, get_settings


class TestDefaults:
    def test_defaults(self):
        s = AutomataSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.failure_policy is FailurePolicy.DISCARD


class TestEnvOverride:
    def test_failure_policy_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTOMATA_FAILURE_POLICY", "raise")
        assert AutomataSettings().failure_policy is FailurePolicy.RAISE

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("AUTOMATA_LOG_LEVEL", "debug")
        assert AutomataSettings().log_level == "DEBUG"

    def test_log_format_from_env(self, monkeypatch):
        monkeypatch.setenv("AUTOMATA_LOG_FORMAT", "JSON")
        assert AutomataSettings().log_format == "json"

    def test_unprefixed_variables_ignored(self, monkeypatch):
        monkeypatch.setenv("FAILURE_POLICY", "raise")
        assert AutomataSettings().failure_policy is FailurePolicy.DISCARD


class TestValidation:
    def test_bad_level(self):
        with pytest.raises(ValidationError):
            AutomataSettings(log_level="LOUD")

    def test_bad_format(self):
        with pytest.raises(ValidationError):
            AutomataSettings(log_format="xml")

    def test_bad_policy(self):
        with pytest.raises(ValidationError):
            AutomataSettings(failure_policy="retry")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload_picks_up_env(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("AUTOMATA_FAILURE_POLICY", "raise")
        assert get_settings() is first
        reloaded = get_settings(_force_reload=True)
        assert reloaded.failure_policy is FailurePolicy.RAISE
