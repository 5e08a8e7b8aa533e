"""
Structured error types for the automata engine.

Every failure the engine knows about is an ``AutomataError`` carrying a
category, a structured context (machine id, state, phase) and an optional
chained cause.  Handler failures are normally swallowed and reported
through logging and the ``on_error`` callback, so the error objects double
as the report payload.

Hierarchy::

    AutomataError
      ├── ConfigError            (CONFIG)
      │     ├── MissingConfigError
      │     └── InvalidConfigError
      ├── TransitionError        (HANDLER)
      │     ├── HandlerError       ── one failed phase (on / exit / enter)
      │     └── StepFailedError    ── raised by advance() under FailurePolicy.RAISE
      └── BusyError              (CONCURRENCY)

Examples:
    >>> err = HandlerError("on", cause=ValueError("boom"))
    >>> err.category
    <ErrorCategory.HANDLER: 'HANDLER'>
    >>> err.with_context(machine_id="m-1", state="a").context.state
    'a'

Tags:
    error-handling, exception-hierarchy, error-context, automata

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"              # Missing or malformed machine configuration
    HANDLER = "HANDLER"            # State handler or hook failed
    CONCURRENCY = "CONCURRENCY"    # Step requested while another is in flight
    INTERNAL = "INTERNAL"          # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        machine_id: Identity of the machine that raised or reported the error
        state: State identifier active when the failure happened
        phase: Step phase (``on``, ``exit``, ``enter``)
        metadata: Additional key-value pairs
    """

    machine_id: str | None = None
    state: Any = None
    phase: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["machine_id", "state", "phase"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class AutomataError(Exception):
    """
    Base exception for all automata errors.

    Subclasses set ``default_category`` so callers can route on category
    without isinstance ladders.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> AutomataError:
        """
        Add context to this error (fluent API).

        Usage:
            raise HandlerError("enter", cause=exc).with_context(state="b")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = repr(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(AutomataError):
    """
    Machine configuration error.

    Raised at construction time only; a running machine never raises it.
    """

    default_category = ErrorCategory.CONFIG


class MissingConfigError(ConfigError):
    """Required configuration is missing."""

    def __init__(self, key: str, message: str | None = None):
        self.key = key
        super().__init__(message or f"Missing required configuration: {key}")


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# TRANSITION ERRORS
# =============================================================================


class TransitionError(AutomataError):
    """Failure while executing a step."""

    default_category = ErrorCategory.HANDLER


class HandlerError(TransitionError):
    """A single phase of a step (``on``, ``exit`` or ``enter``) failed."""

    def __init__(self, phase: str, *, cause: BaseException, state: Any = None):
        self.phase = phase
        super().__init__(
            f"{phase} handler failed: {cause!r}",
            context=ErrorContext(state=state, phase=phase),
            cause=cause,
        )


class StepFailedError(TransitionError):
    """Raised by ``advance()`` when the failure policy surfaces handler errors."""

    def __init__(self, failures: list[HandlerError]):
        self.failures = list(failures)
        phases = ", ".join(f.phase for f in self.failures)
        super().__init__(
            f"Step finished with {len(self.failures)} failed phase(s): {phases}",
            cause=self.failures[0] if self.failures else None,
        )


class BusyError(AutomataError):
    """A step was requested while another step is still in flight."""

    default_category = ErrorCategory.CONCURRENCY

    def __init__(self, machine_id: str | None = None, state: Any = None):
        super().__init__(
            "Unable to advance while a step is in progress",
            context=ErrorContext(machine_id=machine_id, state=state),
        )


def categorize_error(error: BaseException) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, AutomataError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "AutomataError",
    "ConfigError",
    "MissingConfigError",
    "InvalidConfigError",
    "TransitionError",
    "HandlerError",
    "StepFailedError",
    "BusyError",
    "categorize_error",
]
