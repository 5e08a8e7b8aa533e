"""
Local publish/subscribe for machine notifications.

Manifesto:
    A machine tells whoever is watching it that something happened (a
    handler emitted a named event, or the machine is being destroyed)
    without knowing who they are.  Each machine owns one ``EventEmitter``;
    watchers add listeners to it and remove exactly those listeners again.

Listeners are plain callables invoked synchronously, in registration
order, with the :class:`EmittedEvent`.  A listener that returns an
awaitable has it scheduled on the running loop (fire-and-forget).
Exceptions in a listener are logged and don't stop delivery to the rest.

Channels::

    "emit"      ── a handler called emit(event_name, payload)
    "destroy"   ── the machine called destroy()

Tags:
    automata, events, pubsub, listeners

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from automata.core.logging import get_logger

__all__ = [
    "EMIT",
    "DESTROY",
    "EmittedEvent",
    "EventEmitter",
    "Listener",
]

EMIT = "emit"
DESTROY = "destroy"

log = get_logger(__name__)


@dataclass(frozen=True)
class EmittedEvent:
    """Event payload delivered to listeners.

    Attributes:
        source: The machine that emitted the event
        event: Event name (``"destroy"`` for destroy notifications)
        payload: Optional event-specific data
    """

    source: Any
    event: str
    payload: Any = None


Listener = Callable[[EmittedEvent], Any]


class EventEmitter:
    """Per-machine listener registry keyed by channel.

    Example::

        emitter = EventEmitter()
        emitter.on("emit", print)
        emitter.emit("emit", EmittedEvent(source=None, event="ping"))
        emitter.off("emit", print)
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}
        self._pending: set[asyncio.Task] = set()

    def on(self, channel: str, listener: Listener) -> None:
        """Add ``listener`` to ``channel``."""
        self._listeners.setdefault(channel, []).append(listener)

    def off(self, channel: str, listener: Listener) -> bool:
        """Remove one registration of ``listener``; returns whether it was found."""
        listeners = self._listeners.get(channel)
        if not listeners:
            return False
        for index, registered in enumerate(listeners):
            if registered is listener:
                del listeners[index]
                if not listeners:
                    del self._listeners[channel]
                return True
        return False

    def emit(self, channel: str, event: EmittedEvent) -> int:
        """Deliver ``event`` to every listener on ``channel``.

        Returns:
            Number of listeners invoked.
        """
        # Copy: listeners may detach themselves (destroy -> unwatch).
        listeners = list(self._listeners.get(channel, ()))
        for listener in listeners:
            try:
                result = listener(event)
            except Exception as e:
                log.warning(
                    "event_listener_failed",
                    channel=channel,
                    event_name=event.event,
                    error=repr(e),
                )
                continue
            if inspect.isawaitable(result):
                self._schedule(channel, event, result)
        return len(listeners)

    def listener_count(self, channel: str | None = None) -> int:
        """Number of listeners on ``channel`` (or on all channels)."""
        if channel is not None:
            return len(self._listeners.get(channel, ()))
        return sum(len(listeners) for listeners in self._listeners.values())

    def clear(self) -> None:
        self._listeners.clear()

    def _schedule(self, channel: str, event: EmittedEvent, awaitable: Any) -> None:
        async def runner() -> None:
            try:
                await awaitable
            except Exception as e:
                log.warning(
                    "event_listener_failed",
                    channel=channel,
                    event_name=event.event,
                    error=repr(e),
                )

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No running loop (sync caller): run it to completion here.
            asyncio.run(runner())
            return

        task = loop.create_task(runner())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for scheduled async listeners to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
