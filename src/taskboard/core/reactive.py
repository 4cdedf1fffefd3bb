# src/taskboard/core/reactive.py

from __future__ import annotations

"""
Reactive primitives for the single-threaded asyncio pipeline.

- Stream: multicast push channel (values and failures).
- Cell: a Stream that always holds exactly one current value.

Everything here is meant to be touched from the event loop thread only;
there are no locks because there is no concurrent writer.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]


@dataclass(slots=True, eq=False)
class _Listener(Generic[T]):
    on_next: Callable[[T], None]
    on_error: Callable[[BaseException], None] | None


class Stream(Generic[T]):
    """Push channel with any number of listeners."""

    def __init__(self, name: str = "stream") -> None:
        self.name = name
        self._listeners: list[_Listener[T]] = []

    def subscribe(
        self,
        on_next: Callable[[T], None],
        on_error: Callable[[BaseException], None] | None = None,
    ) -> Unsubscribe:
        listener = _Listener(on_next=on_next, on_error=on_error)
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, value: T) -> None:
        # Snapshot: listeners may unsubscribe themselves while being notified.
        for listener in list(self._listeners):
            try:
                listener.on_next(value)
            except Exception:
                logger.exception("Listener on %s failed", self.name)

    def fail(self, exc: BaseException) -> None:
        for listener in list(self._listeners):
            if listener.on_error is None:
                continue
            try:
                listener.on_error(exc)
            except Exception:
                logger.exception("Error listener on %s failed", self.name)

    def next(self) -> asyncio.Future[T]:
        """
        Future resolved by the next emission (or failed by the next failure).

        Registration happens immediately, so call this *before* the action
        that is expected to produce the value.
        """
        fut: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        unsubscribe: Unsubscribe | None = None

        def _done() -> None:
            if unsubscribe is not None:
                unsubscribe()

        def _on_next(value: T) -> None:
            if not fut.done():
                fut.set_result(value)
            _done()

        def _on_error(exc: BaseException) -> None:
            if not fut.done():
                fut.set_exception(exc)
            _done()

        unsubscribe = self.subscribe(_on_next, _on_error)
        fut.add_done_callback(lambda _f: _done())
        return fut


class Cell(Stream[T]):
    """Holds one current value; set() replaces it and notifies listeners."""

    def __init__(self, initial: T, name: str = "cell") -> None:
        super().__init__(name)
        self._value = initial

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self.emit(value)
