"""Tests for automata.core.errors module."""

import pytest

from automata.core.errors import (
    AutomataError,
    BusyError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    HandlerError,
    InvalidConfigError,
    MissingConfigError,
    StepFailedError,
    TransitionError,
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.machine_id is None
        assert ctx.state is None
        assert ctx.phase is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_excludes_none_and_merges_metadata(self):
        ctx = ErrorContext(machine_id="m-1", phase="on", metadata={"attempt": 2})
        assert ctx.to_dict() == {"machine_id": "m-1", "phase": "on", "attempt": 2}


class TestAutomataError:
    def test_default_category(self):
        error = AutomataError("boom")
        assert error.category == ErrorCategory.INTERNAL
        assert error.message == "boom"
        assert str(error) == "boom"

    def test_with_context_sets_known_fields_and_metadata(self):
        error = AutomataError("boom").with_context(state="a", ticket="T-1")
        assert error.context.state == "a"
        assert error.context.metadata == {"ticket": "T-1"}

    def test_cause_is_chained(self):
        cause = ValueError("inner")
        error = AutomataError("outer", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_to_dict(self):
        error = AutomataError("boom", cause=KeyError("k")).with_context(machine_id="m-1")
        d = error.to_dict()
        assert d["error_type"] == "AutomataError"
        assert d["category"] == "INTERNAL"
        assert d["context"] == {"machine_id": "m-1"}
        assert "KeyError" in d["cause"]

    def test_repr(self):
        assert repr(AutomataError("x")) == "AutomataError('x', category=INTERNAL)"


class TestConfigErrors:
    def test_missing_config(self):
        error = MissingConfigError("initial")
        assert isinstance(error, ConfigError)
        assert error.category == ErrorCategory.CONFIG
        assert error.key == "initial"
        assert "initial" in str(error)

    def test_invalid_config(self):
        error = InvalidConfigError("states", 42)
        assert error.value == 42
        assert "42" in str(error)


class TestTransitionErrors:
    def test_handler_error(self):
        cause = RuntimeError("nope")
        error = HandlerError("exit", cause=cause, state="a")
        assert isinstance(error, TransitionError)
        assert error.category == ErrorCategory.HANDLER
        assert error.phase == "exit"
        assert error.context.state == "a"
        assert error.context.phase == "exit"
        assert error.cause is cause

    def test_step_failed_error_collects_failures(self):
        failures = [
            HandlerError("on", cause=ValueError("a")),
            HandlerError("enter", cause=ValueError("b")),
        ]
        error = StepFailedError(failures)
        assert error.failures == failures
        assert error.cause is failures[0]
        assert "on, enter" in str(error)

    def test_busy_error(self):
        error = BusyError("m-1", "a")
        assert error.category == ErrorCategory.CONCURRENCY
        assert error.to_dict()["context"] == {"machine_id": "m-1", "state": "a"}


class TestCategorize:
    @pytest.mark.parametrize(
        "error, expected",
        [
            (MissingConfigError("x"), ErrorCategory.CONFIG),
            (BusyError(), ErrorCategory.CONCURRENCY),
            (ValueError("plain"), ErrorCategory.INTERNAL),
        ],
    )
    def test_categorize_error(self, error, expected):
        assert categorize_error(error) == expected
