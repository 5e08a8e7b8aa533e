"""Automata Engine -- state registry, result normaliser, executor, watch graph.

Dependency order (leaves first)::

    states.py    StateRegistry / StateDescriptor
    results.py   ResultKind, classify_result, drain_result
    watch.py     WatchRegistry (identity-keyed listener pairs)
    machine.py   Automata: advance, hooks, busy guard, emit / watch / destroy
"""

from automata.engine.machine import Automata, AutomataConfig, HookArgs, TransitionArgs
from automata.engine.results import ResultKind, classify_result, drain_result
from automata.engine.states import State, StateDescriptor, StateKind, StateRegistry

__all__ = [
    "Automata",
    "AutomataConfig",
    "HookArgs",
    "ResultKind",
    "State",
    "StateDescriptor",
    "StateKind",
    "StateRegistry",
    "TransitionArgs",
    "classify_result",
    "drain_result",
]
