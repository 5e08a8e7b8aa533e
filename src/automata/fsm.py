"""Minimal synchronous state machine.

``FSM`` is the plain counterpart of :class:`~automata.Automata`: no hooks,
no data cell, no events, no awaiting.  Each state maps to a function that
receives the data passed to ``next()`` and may call ``step.next(state)``::

    fsm = FSM("red", {
        "red": lambda step: step.next("green"),
        "green": lambda step: step.next("yellow" if step.data else "green"),
        "yellow": lambda step: step.next("red"),
    })
    fsm.next()
    fsm.check("green")  # True
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from automata.core.errors import InvalidConfigError, MissingConfigError
from automata.core.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Step:
    data: Any
    current: Any
    next: Callable[[Any], None]


class FSM:
    def __init__(self, initial: Any, transitions: Mapping[Any, Callable[[Step], Any]]):
        if initial is None:
            raise MissingConfigError("initial")
        if not isinstance(transitions, Mapping):
            raise InvalidConfigError("transitions", transitions, "transitions must be a mapping")
        for state, func in transitions.items():
            if not callable(func):
                raise InvalidConfigError(f"transitions.{state}", func)
        self.initial = initial
        self.current = initial
        self.transitions = dict(transitions)

    def next(self, data: Any = None) -> None:
        """Run the current state's transition function, if it has one."""
        func = self.transitions.get(self.current)
        if func is None:
            log.debug("fsm_no_transition", state=self.current)
            return
        func(Step(data=data, current=self.current, next=self._transition_next))

    def _transition_next(self, state: Any) -> None:
        self.current = state

    def reset(self) -> None:
        self.current = self.initial

    def check(self, state: Any) -> bool:
        return self.current == state

    def __repr__(self) -> str:
        return f"FSM(current={self.current!r})"


__all__ = ["FSM", "Step"]
