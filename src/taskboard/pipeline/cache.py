# src/taskboard/pipeline/cache.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

E = TypeVar("E")


class EntityCache(Generic[E]):
    """
    Lazy, shared snapshot of a whole collection.

    The first get_all() starts one load; concurrent and later callers await
    the same load and get the same tuple. A failed load is not kept, so the
    next caller starts a fresh one.

    There is no invalidation on mutation: a snapshot stays as loaded until
    invalidate() is called explicitly.
    """

    def __init__(self, load: Callable[[], Awaitable[Sequence[E]]], *, name: str = "cache") -> None:
        self._load = load
        self.name = name
        self._task: asyncio.Task[tuple[E, ...]] | None = None
        self.load_count = 0

    @property
    def loaded(self) -> bool:
        return self._task is not None and self._task.done() and self._task.exception() is None

    async def get_all(self) -> tuple[E, ...]:
        task = self._task
        if task is None:
            task = asyncio.get_running_loop().create_task(self._load_once())
            self._task = task
        else:
            logger.debug("%s: sharing snapshot", self.name)

        try:
            # One caller being cancelled must not cancel the shared load.
            return await asyncio.shield(task)
        except Exception:
            if self._task is task:
                self._task = None
            raise

    def invalidate(self) -> None:
        if self._task is not None and not self._task.done():
            # Let the in-flight load finish for whoever awaits it; new callers reload.
            logger.debug("%s: invalidated while loading", self.name)
        self._task = None
        logger.info("%s: snapshot invalidated", self.name)

    async def _load_once(self) -> tuple[E, ...]:
        self.load_count += 1
        items = tuple(await self._load())
        logger.info("%s: loaded %d items", self.name, len(items))
        return items
