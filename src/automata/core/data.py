"""Data cell: the single mutable payload slot of a machine.

Handlers never touch the payload directly; they receive the cell's
accessor, a function with three call patterns::

    data()                 # read
    data({"count": 1})     # replace
    data(lambda n: n + 1)  # derive from the current payload

Because a callable argument is always treated as a derivation, a function
cannot itself be stored as the payload through the accessor.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any


class _Unset:
    """Sentinel type for "no argument given"."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

DataAccessor = Callable[..., Any]


class DataCell:
    """Holds one caller-defined payload; last write wins."""

    __slots__ = ("_value",)

    def __init__(self, value: Any = None) -> None:
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def update(self, update: Any = UNSET) -> Any:
        """Read, replace or derive the payload and return the current value."""
        if update is UNSET:
            return self._value
        if callable(update):
            self._value = update(self._value)
        else:
            self._value = update
        return self._value

    def replace(self, value: Any) -> None:
        """Store ``value`` as the payload, callables included."""
        self._value = value

    @property
    def accessor(self) -> DataAccessor:
        """The function handed to handlers in their argument bundles."""
        return self.update

    def __repr__(self) -> str:
        return f"DataCell({self._value!r})"


__all__ = ["UNSET", "DataAccessor", "DataCell"]
