"""State registry: state identifier → normalised handler descriptor.

A state may be declared three ways::

    states = {
        "a": lambda t: t.next("b"),                     # bare transition function
        "b": State(on=step_b, exit=leave_b),            # handler with hooks
        "c": {"enter": arrive_c, "on": step_c},         # same, as a mapping
        "d": {"final": True},                           # marker, no behaviour
    }

Each declaration is resolved once, at construction, into a
:class:`StateDescriptor` tagged with a :class:`StateKind`; the executor
switches on the tag and never re-inspects the original object.

Only the *shape* of declarations is checked.  Next-state targets passed
to ``next()`` are not, and an unknown identifier simply resolves to
``None`` when a later step looks it up.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from automata.core.errors import InvalidConfigError

Handler = Callable[[Any], Any]

_DESCRIPTOR_KEYS = frozenset({"enter", "on", "exit", "final"})


class StateKind(str, Enum):
    FUNCTION = "function"  # bare callable, used as ``on``
    HOOKED = "hooked"      # on / enter / exit, any subset
    MARKER = "marker"      # no behaviour, may declare final


@dataclass(frozen=True)
class State:
    """Declarative state with optional hooks.

    Attributes:
        on: Transition handler run by ``advance()`` while this state is current
        enter: Hook run after a step moved the machine into this state
        exit: Hook run after a step moved the machine out of this state
        final: Entering this state completes the machine
    """

    on: Handler | None = None
    enter: Handler | None = None
    exit: Handler | None = None
    final: bool = False


@dataclass(frozen=True)
class StateDescriptor:
    kind: StateKind
    on: Handler | None = None
    enter: Handler | None = None
    exit: Handler | None = None
    final: bool = False

    @classmethod
    def resolve(cls, state_id: Any, declaration: Any) -> StateDescriptor:
        """Normalise one declaration, raising InvalidConfigError on bad shapes."""
        if isinstance(declaration, StateDescriptor):
            return declaration
        if isinstance(declaration, State):
            fields = {
                "on": declaration.on,
                "enter": declaration.enter,
                "exit": declaration.exit,
                "final": declaration.final,
            }
        elif isinstance(declaration, Mapping):
            unknown = set(declaration) - _DESCRIPTOR_KEYS
            if unknown:
                raise InvalidConfigError(
                    f"states.{state_id}",
                    declaration,
                    f"State {state_id!r} has unknown keys: {sorted(map(str, unknown))}",
                )
            fields = {key: declaration.get(key) for key in ("on", "enter", "exit")}
            fields["final"] = declaration.get("final", False)
        elif callable(declaration):
            return cls(kind=StateKind.FUNCTION, on=declaration)
        else:
            raise InvalidConfigError(f"states.{state_id}", declaration)

        for key in ("on", "enter", "exit"):
            if fields[key] is not None and not callable(fields[key]):
                raise InvalidConfigError(
                    f"states.{state_id}.{key}",
                    fields[key],
                    f"State {state_id!r}: {key} must be callable",
                )
        final = bool(fields["final"])
        if fields["on"] is None and fields["enter"] is None and fields["exit"] is None:
            return cls(kind=StateKind.MARKER, final=final)
        return cls(
            kind=StateKind.HOOKED,
            on=fields["on"],
            enter=fields["enter"],
            exit=fields["exit"],
            final=final,
        )


class StateRegistry(Mapping):
    """Immutable mapping of state identifier to :class:`StateDescriptor`."""

    def __init__(self, states: Mapping[Any, Any]):
        if not isinstance(states, Mapping):
            raise InvalidConfigError("states", states, "states must be a mapping")
        self._descriptors: dict[Any, StateDescriptor] = {
            state_id: StateDescriptor.resolve(state_id, declaration)
            for state_id, declaration in states.items()
        }

    def get(self, state_id: Any, default: Any = None) -> StateDescriptor | None:
        return self._descriptors.get(state_id, default)

    def is_final(self, state_id: Any) -> bool:
        descriptor = self._descriptors.get(state_id)
        return descriptor is not None and descriptor.final

    def __getitem__(self, state_id: Any) -> StateDescriptor:
        return self._descriptors[state_id]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def __repr__(self) -> str:
        return f"StateRegistry({list(self._descriptors)!r})"


__all__ = ["Handler", "State", "StateDescriptor", "StateKind", "StateRegistry"]
