"""
Automata - asynchronous finite-state-machine engine.

Manifesto:
    A workflow is a set of named states, each with a handler that decides
    what happens next.  Handlers may finish immediately, after awaiting
    something, or across several yields; the engine gives all of them the
    same contract: one ``advance()`` runs one complete step, and only one
    step is ever in flight.

ARCHITECTURE
────────────
::

    advance(data?)
      │  busy? ──► log advance_rejected_busy, return False
      ▼
    data cell updated (if data given) ── busy = ADVANCING
      │
      ▼
    on(TransitionArgs) ──► drain_result ──► failure? report
      │
      ▼ current changed?
    exit(HookArgs) of previous state ──► drain_result
    enter(HookArgs) of new state     ──► drain_result
      │
      ▼
    busy = IDLE  (always)  ──► FailurePolicy.RAISE and failures? raise StepFailedError

Watching::

    child.watch(parent)
      parent.emit("x", p)  ──► child's events["x"](EmittedEvent(parent, "x", p))
      parent.destroy()     ──► child.unwatch(parent)

Example::

    from automata import Automata, State

    machine = Automata(
        initial="a",
        data=0,
        states={
            "a": lambda t: (t.data(lambda n: n + 1), t.next("b")),
            "b": State(on=lambda t: t.next("c"), exit=lambda h: h.data(10)),
            "c": {"final": True},
        },
    )
    await machine.advance()   # current == "b", data == 1
    await machine.advance()   # current == "c", data == 10, complete

Tags:
    automata, fsm, state-machine, asyncio, workflow

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from automata.core.data import UNSET, DataAccessor, DataCell
from automata.core.errors import (
    BusyError,
    HandlerError,
    InvalidConfigError,
    MissingConfigError,
    StepFailedError,
)
from automata.core.events import DESTROY, EMIT, EmittedEvent, EventEmitter
from automata.core.logging import LogContext, get_logger
from automata.core.settings import FailurePolicy, get_settings
from automata.engine.results import drain_result
from automata.engine.states import Handler, StateDescriptor, StateRegistry
from automata.engine.watch import WatchRegistry, WatchSubscription

log = get_logger(__name__)

EventHandler = Callable[[EmittedEvent], Any]


class InnerState(str, Enum):
    IDLE = "idle"
    ADVANCING = "advancing"


@dataclass(frozen=True)
class TransitionArgs:
    """Argument bundle passed to ``on`` handlers.

    Attributes:
        data: Data cell accessor (read / replace / derive)
        current: State identifier the step started in
        next: Request a state change; ignored once the machine is complete
        complete: Mark the machine complete
        emit: Emit a named event to watchers
        args: Extra arguments for this step
    """

    data: DataAccessor
    current: Any
    next: Callable[[Any], None]
    complete: Callable[[], None]
    emit: Callable[..., None]
    args: tuple = ()


@dataclass(frozen=True)
class HookArgs:
    """Argument bundle passed to ``enter`` and ``exit`` hooks."""

    data: DataAccessor
    previous_state: Any
    next_state: Any


@dataclass
class AutomataConfig:
    """Machine configuration.

    Attributes:
        initial: Starting state identifier (required)
        states: Registry declarations, see :mod:`automata.engine.states` (required)
        data: Initial data cell payload
        events: Event name → handler, used when this machine watches others
        args: Default extra arguments exposed as ``TransitionArgs.args``
        failure_policy: Overrides ``AutomataSettings.failure_policy``
        on_error: Called with every :class:`HandlerError` the engine swallows
    """

    initial: Any = None
    states: Mapping[Any, Any] | None = None
    data: Any = None
    events: Mapping[str, EventHandler] = field(default_factory=dict)
    args: tuple = ()
    failure_policy: FailurePolicy | str | None = None
    on_error: Callable[[HandlerError], Any] | None = None

    def validate(self) -> None:
        if self.initial is None:
            raise MissingConfigError("initial")
        if self.states is None:
            raise MissingConfigError("states")
        if not isinstance(self.events, Mapping):
            raise InvalidConfigError("events", self.events, "events must be a mapping")
        for name, handler in self.events.items():
            if not callable(handler):
                raise InvalidConfigError(f"events.{name}", handler)
        if self.on_error is not None and not callable(self.on_error):
            raise InvalidConfigError("on_error", self.on_error)


class Automata:
    """Asynchronous state machine with hooks, a data cell and event watching.

    All mutation happens on the event loop thread; the engine is not
    thread-safe.
    """

    def __init__(
        self,
        config: AutomataConfig | None = None,
        /,
        *,
        initial: Any = None,
        states: Mapping[Any, Any] | None = None,
        transitions: Mapping[Any, Any] | None = None,
        data: Any = None,
        events: Mapping[str, EventHandler] | None = None,
        args: tuple = (),
        failure_policy: FailurePolicy | str | None = None,
        on_error: Callable[[HandlerError], Any] | None = None,
    ):
        if config is None:
            if states is not None and transitions is not None:
                raise InvalidConfigError(
                    "transitions", transitions, "Pass either states or transitions, not both"
                )
            config = AutomataConfig(
                initial=initial,
                states=states if states is not None else transitions,
                data=data,
                events=events or {},
                args=tuple(args),
                failure_policy=failure_policy,
                on_error=on_error,
            )
        config.validate()

        self._id = str(uuid.uuid4())
        self._config = config
        self._states = StateRegistry(config.states)
        self._events: Mapping[str, EventHandler] = dict(config.events)
        policy = config.failure_policy or get_settings().failure_policy
        try:
            self._policy = FailurePolicy(policy)
        except ValueError as e:
            raise InvalidConfigError("failure_policy", policy) from e
        self._cell = DataCell(config.data)
        self._current = config.initial
        self._complete = self._states.is_final(config.initial)
        self._inner = InnerState.IDLE
        self._emitter = EventEmitter()
        self._watches = WatchRegistry()

    @classmethod
    def from_config(cls, config: AutomataConfig) -> Automata:
        return cls(config)

    # ── Read-only surface ───────────────────────────────────────

    @property
    def id(self) -> str:
        return self._id

    @property
    def current(self) -> Any:
        return self._current

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def data(self) -> Any:
        return self._cell.value

    @property
    def busy(self) -> bool:
        return self._inner is InnerState.ADVANCING

    @property
    def states(self) -> StateRegistry:
        return self._states

    @property
    def failure_policy(self) -> FailurePolicy:
        return self._policy

    @property
    def emitter(self) -> EventEmitter:
        """Listener registry other machines attach to when watching this one."""
        return self._emitter

    @property
    def watching(self) -> tuple[str, ...]:
        """Identities of the machines this machine watches."""
        return tuple(self._watches)

    def check(self, state: Any) -> bool:
        return self._current == state

    def reset(self, hard: bool = False) -> None:
        """Rewind to the initial state.

        By default only ``current`` is rewound; completion and the data
        cell are left as they are.  ``hard=True`` also recomputes
        completion for the initial state and restores the initial payload.
        """
        self._current = self._config.initial
        if hard:
            self._complete = self._states.is_final(self._config.initial)
            self._cell.replace(self._config.data)

    # ── Stepping ────────────────────────────────────────────────

    async def advance(self, data: Any = UNSET, *, args: tuple | None = None) -> bool:
        """Run one step from the current state.

        Args:
            data: If given, applied to the data cell (value or derivation)
                before the step starts
            args: Extra arguments for this step; defaults to ``config.args``

        Returns:
            True if the step ran, False if it was rejected because another
            step is still in flight.

        Raises:
            StepFailedError: only under ``FailurePolicy.RAISE``, after the
                step has fully finished, if any phase failed
        """
        if self._inner is InnerState.ADVANCING:
            rejection = BusyError(self._id, self._current)
            log.warning("advance_rejected_busy", **rejection.to_dict())
            return False

        if data is not UNSET:
            self._cell.update(data)

        self._inner = InnerState.ADVANCING
        try:
            failures = await self._run_step(tuple(args) if args is not None else self._config.args)
            # Suspend once while still ADVANCING so a call issued in the same
            # tick is rejected even when every handler is synchronous.
            await asyncio.sleep(0)
        finally:
            self._inner = InnerState.IDLE

        if failures and self._policy is FailurePolicy.RAISE:
            raise StepFailedError(failures)
        return True

    async def _run_step(self, args: tuple) -> list[HandlerError]:
        previous = self._current
        descriptor = self._states.get(previous)
        failures: list[HandlerError] = []

        async with LogContext(machine_id=self._id, state=previous):
            log.debug("step_started", kind=descriptor.kind.value if descriptor else None)

            if descriptor is not None and descriptor.on is not None:
                bundle = TransitionArgs(
                    data=self._cell.accessor,
                    current=previous,
                    next=self._request_next,
                    complete=self._mark_complete,
                    emit=self.emit,
                    args=args,
                )
                await self._run_phase("on", descriptor.on, bundle, previous, failures)

            if self._current != previous:
                target = self._current
                log.debug("state_changed", previous_state=previous, next_state=target)
                hook_args = HookArgs(
                    data=self._cell.accessor,
                    previous_state=previous,
                    next_state=target,
                )
                if descriptor is not None and descriptor.exit is not None:
                    await self._run_phase("exit", descriptor.exit, hook_args, previous, failures)

                entered: StateDescriptor | None = self._states.get(target)
                if entered is not None and entered.enter is not None:
                    await self._run_phase("enter", entered.enter, hook_args, target, failures)

            log.debug("step_finished", current=self._current, complete=self._complete)
        return failures

    async def _run_phase(
        self,
        phase: str,
        handler: Handler,
        bundle: TransitionArgs | HookArgs,
        state: Any,
        failures: list[HandlerError],
    ) -> None:
        try:
            result = handler(bundle)
        except Exception as e:
            error: Exception | None = e
        else:
            error = (await drain_result(result)).error

        if error is None:
            return

        failure = HandlerError(phase, cause=error, state=state)
        failure.with_context(machine_id=self._id)
        failures.append(failure)
        self._report(failure)

    def _report(self, failure: HandlerError) -> None:
        log.error("handler_failed", exc_info=failure.cause, **failure.to_dict())
        if self._config.on_error is None:
            return
        try:
            self._config.on_error(failure)
        except Exception as e:
            log.warning("on_error_callback_failed", error=repr(e))

    def _request_next(self, state: Any) -> None:
        if self._complete:
            return
        self._current = state
        if self._states.is_final(state):
            self._complete = True

    def _mark_complete(self) -> None:
        self._complete = True

    # ── Events and watching ─────────────────────────────────────

    def emit(self, event: str, payload: Any = None) -> None:
        """Broadcast ``event`` to the machines watching this one."""
        self._emitter.emit(EMIT, EmittedEvent(source=self, event=event, payload=payload))

    def watch(self, other: Automata) -> Automata:
        """Forward ``other``'s emitted events into this machine's ``events`` handlers.

        Watching a machine that is already watched is a no-op.
        """
        if other.id in self._watches:
            return self

        def on_emit(emitted: EmittedEvent) -> Any:
            handler = self._events.get(emitted.event)
            if handler is None:
                return None
            return handler(EmittedEvent(source=other, event=emitted.event, payload=emitted.payload))

        def on_destroy(emitted: EmittedEvent) -> None:
            self.unwatch(other)

        self._watches.add(
            WatchSubscription(
                watched_id=other.id,
                emitter=other.emitter,
                on_emit=on_emit,
                on_destroy=on_destroy,
            )
        )
        log.debug("watch_added", machine_id=self._id, watched_id=other.id)
        return self

    def unwatch(self, other: Automata) -> None:
        """Stop watching ``other``; silently does nothing if not watching it."""
        if self._watches.remove(other.id) is not None:
            log.debug("watch_removed", machine_id=self._id, watched_id=other.id)

    def destroy(self) -> None:
        """Tell watchers to detach.  The machine itself stays usable."""
        log.debug("machine_destroyed", machine_id=self._id)
        self._emitter.emit(DESTROY, EmittedEvent(source=self, event=DESTROY))

    def __repr__(self) -> str:
        return (
            f"Automata(id={self._id!r}, current={self._current!r}, "
            f"complete={self._complete}, busy={self.busy})"
        )


__all__ = [
    "Automata",
    "AutomataConfig",
    "EventHandler",
    "HookArgs",
    "InnerState",
    "TransitionArgs",
]
