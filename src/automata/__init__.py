"""
Automata - asynchronous finite-state-machine engine.

Public surface::

    automata.Automata        step-at-a-time async machine (hooks, data cell, watching)
    automata.AutomataConfig  machine configuration
    automata.State           declarative state with on / enter / exit / final
    automata.FSM             minimal synchronous machine
    automata.core            errors, logging, settings, data cell, events
    automata.engine          registry, result normaliser, executor, watch graph
"""

__version__ = "0.1.0"

from automata.core.data import UNSET, DataCell
from automata.core.errors import (
    AutomataError,
    BusyError,
    ConfigError,
    ErrorCategory,
    HandlerError,
    InvalidConfigError,
    MissingConfigError,
    StepFailedError,
    TransitionError,
)
from automata.core.events import EmittedEvent, EventEmitter
from automata.core.settings import AutomataSettings, FailurePolicy, get_settings
from automata.engine.machine import (
    Automata,
    AutomataConfig,
    HookArgs,
    InnerState,
    TransitionArgs,
)
from automata.engine.results import ResultKind, classify_result, drain_result
from automata.engine.states import State, StateDescriptor, StateKind, StateRegistry
from automata.fsm import FSM

__all__ = [
    "UNSET",
    "Automata",
    "AutomataConfig",
    "AutomataError",
    "AutomataSettings",
    "BusyError",
    "ConfigError",
    "DataCell",
    "EmittedEvent",
    "ErrorCategory",
    "EventEmitter",
    "FSM",
    "FailurePolicy",
    "HandlerError",
    "HookArgs",
    "InnerState",
    "InvalidConfigError",
    "MissingConfigError",
    "ResultKind",
    "State",
    "StateDescriptor",
    "StateKind",
    "StateRegistry",
    "StepFailedError",
    "TransitionArgs",
    "TransitionError",
    "classify_result",
    "drain_result",
    "get_settings",
]
