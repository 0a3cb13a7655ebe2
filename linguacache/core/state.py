"""
Observable value holder.

A StateStream always has a current value. Observers either register a
callback or iterate `watch()`, which yields the current value and then
every change. Stopping iteration unregisters the observer and has no
effect on whoever is producing the values.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], None]


class StateStream(Generic[T]):
    """Current value plus change notifications."""

    def __init__(self, initial: T):
        self._value = initial
        self._listeners: list[Listener] = []
        self._queues: list[asyncio.Queue[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        """Publish a new value. Equal values are not re-published."""
        if value == self._value:
            return
        self._value = value

        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception(f"State listener {listener!r} failed")

        for queue in list(self._queues):
            queue.put_nowait(value)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def watch(self) -> AsyncIterator[T]:
        """Yield the current value, then each change until the caller stops."""
        queue: asyncio.Queue[T] = asyncio.Queue()
        self._queues.append(queue)
        try:
            yield self._value
            while True:
                yield await queue.get()
        finally:
            self._queues.remove(queue)

    @property
    def observer_count(self) -> int:
        return len(self._listeners) + len(self._queues)
