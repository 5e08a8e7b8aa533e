"""Result normalisation for handler return values.

Handlers may finish in one of four shapes, classified once into a
:class:`ResultKind` and drained to completion before the step moves on:

    EMPTY              ``None`` (or any plain value, which is ignored)
    DEFERRED           an awaitable: coroutine, Task, Future
    INCREMENTAL        a synchronous iterator, e.g. a generator
    INCREMENTAL_ASYNC  an asynchronous iterator, e.g. an async generator

Incremental results are exhausted in-line by the single ``advance()`` that
produced them; yielded values are discarded.  Failures are caught here
and handed back in the :class:`DrainOutcome` rather than raised.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResultKind(str, Enum):
    EMPTY = "empty"
    DEFERRED = "deferred"
    INCREMENTAL = "incremental"
    INCREMENTAL_ASYNC = "incremental_async"


@dataclass(frozen=True)
class DrainOutcome:
    kind: ResultKind
    error: Exception | None = None
    ticks: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def classify_result(result: Any) -> ResultKind:
    """Map a handler return value to its :class:`ResultKind`."""
    if result is None:
        return ResultKind.EMPTY
    if isinstance(result, AsyncIterator):
        return ResultKind.INCREMENTAL_ASYNC
    if inspect.isawaitable(result):
        return ResultKind.DEFERRED
    if isinstance(result, Iterator):
        return ResultKind.INCREMENTAL
    return ResultKind.EMPTY


async def drain_result(result: Any) -> DrainOutcome:
    """Wait out ``result`` according to its kind.

    ``ticks`` counts the elements consumed from incremental results.
    """
    kind = classify_result(result)
    ticks = 0
    try:
        match kind:
            case ResultKind.EMPTY:
                pass
            case ResultKind.DEFERRED:
                await result
            case ResultKind.INCREMENTAL:
                for _ in result:
                    ticks += 1
            case ResultKind.INCREMENTAL_ASYNC:
                async for _ in result:
                    ticks += 1
    except Exception as e:
        return DrainOutcome(kind=kind, error=e, ticks=ticks)
    return DrainOutcome(kind=kind, ticks=ticks)


__all__ = ["DrainOutcome", "ResultKind", "classify_result", "drain_result"]
