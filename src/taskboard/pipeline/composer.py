# src/taskboard/pipeline/composer.py

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.reactive import Stream
from .view_state import PageSpec, SortSpec, ViewStateStore

logger = logging.getLogger(__name__)

F = TypeVar("F")


@dataclass(frozen=True, slots=True)
class QueryDescriptor(Generic[F]):
    """Filter + sort + page captured at one instant. Equality is the dedup key."""

    filter: F
    sort: SortSpec[Any]
    page: PageSpec


class QueryComposer(Generic[F]):
    """
    Combine the latest filter, sort and pagination into one descriptor.

    Input changes only *schedule* a flush with loop.call_soon; everything set
    during the same synchronous run collapses into a single descriptor built
    from the final values. A descriptor equal to the previous one is dropped
    unless refresh() asked for a forced run.
    """

    def __init__(self, view: ViewStateStore[F, Any]) -> None:
        self._view = view
        self.descriptors: Stream[QueryDescriptor[F]] = Stream(name=f"{view.name}.descriptors")
        self._flush_handle: asyncio.Handle | None = None
        self._last: QueryDescriptor[F] | None = None
        self._force = False
        self._unsubscribers: list[Any] = []

    def start(self) -> None:
        """Subscribe to the view cells and schedule the initial descriptor."""
        if self._unsubscribers:
            return
        for cell in (self._view.filter, self._view.sort, self._view.pagination):
            self._unsubscribers.append(cell.subscribe(self._on_input))
        self._schedule()

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        if self._flush_handle is not None:
            self._flush_handle.cancel()
            self._flush_handle = None

    def refresh(self) -> None:
        """Re-emit the current combination even if it did not change."""
        self._force = True
        self._schedule()

    def capture(self) -> QueryDescriptor[F]:
        return QueryDescriptor(
            filter=self._view.filter.value,
            sort=self._view.sort.value,
            page=self._view.pagination.value,
        )

    def _on_input(self, _value: Any) -> None:
        self._schedule()

    def _schedule(self) -> None:
        if self._flush_handle is not None:
            return
        self._flush_handle = asyncio.get_running_loop().call_soon(self._flush)

    def _flush(self) -> None:
        self._flush_handle = None
        descriptor = self.capture()
        force, self._force = self._force, False

        if not force and descriptor == self._last:
            logger.debug("%s: descriptor unchanged, skipping", self._view.name)
            return

        self._last = descriptor
        logger.debug("%s: descriptor %s", self._view.name, descriptor)
        self.descriptors.emit(descriptor)
