"""Typed change notifications for engine properties.

A host UI subscribes a callback per property and re-renders when it fires.
Every assignment notifies, even when the new value equals the old one.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Observable(Generic[T]):
    """A value holder that calls its subscribers on every update."""

    def __init__(self, name: str, value: T) -> None:
        self.name = name
        self._value = value
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def clear(self) -> None:
        """Drop all subscribers."""
        self._subscribers.clear()
