"""Watch bookkeeping: which machines this machine listens to, and how.

``watch(other)`` registers two listeners on ``other``'s emitter (one
forwarding named events, one detaching on destroy).  The pair is kept
here under ``other``'s identity so ``unwatch`` removes exactly those two
listeners and nothing else.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from automata.core.events import DESTROY, EMIT, EventEmitter, Listener


@dataclass(frozen=True)
class WatchSubscription:
    watched_id: str
    emitter: EventEmitter
    on_emit: Listener
    on_destroy: Listener

    def attach(self) -> None:
        self.emitter.on(EMIT, self.on_emit)
        self.emitter.on(DESTROY, self.on_destroy)

    def detach(self) -> None:
        self.emitter.off(EMIT, self.on_emit)
        self.emitter.off(DESTROY, self.on_destroy)


class WatchRegistry:
    """Identity-keyed subscriptions owned by one watching machine."""

    def __init__(self) -> None:
        self._subscriptions: dict[str, WatchSubscription] = {}

    def add(self, subscription: WatchSubscription) -> None:
        subscription.attach()
        self._subscriptions[subscription.watched_id] = subscription

    def remove(self, watched_id: str) -> WatchSubscription | None:
        """Detach and forget the subscription for ``watched_id``, if any."""
        subscription = self._subscriptions.pop(watched_id, None)
        if subscription is not None:
            subscription.detach()
        return subscription

    def __contains__(self, watched_id: Any) -> bool:
        return watched_id in self._subscriptions

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._subscriptions))

    def __len__(self) -> int:
        return len(self._subscriptions)


__all__ = ["WatchRegistry", "WatchSubscription"]
