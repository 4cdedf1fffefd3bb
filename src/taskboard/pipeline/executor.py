# src/taskboard/pipeline/executor.py

from __future__ import annotations

"""
Query executor.

Turns a QueryDescriptor into one store request and publishes the mapped page.

Switch-latest: every submitted descriptor gets a sequence number. Only the
request holding the newest number may publish a result or a failure; older
requests are left to finish on the wire and their outcome is dropped.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.ports import EntityAdapter, TableStore
from ..core.reactive import Stream
from ..errors import CountUnavailableError
from .composer import QueryDescriptor
from .status import OperationStatus

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class QueryResult(Generic[E]):
    rows: tuple[E, ...]
    total_count: int
    page: int
    page_size: int
    total_pages: int


def total_pages(total_count: int, page_size: int) -> int:
    return math.ceil(total_count / page_size)


class QueryExecutor(Generic[E]):
    def __init__(
        self,
        store: TableStore,
        adapter: EntityAdapter[E],
        status: OperationStatus,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._status = status
        self.results: Stream[QueryResult[E]] = Stream(name=f"{adapter.table}.results")
        self._seq = 0
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def sequence(self) -> int:
        return self._seq

    def submit(self, descriptor: QueryDescriptor[Any]) -> asyncio.Task[None]:
        self._seq += 1
        seq = self._seq
        task = asyncio.get_running_loop().create_task(self._run(seq, descriptor))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every request submitted so far has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, seq: int, descriptor: QueryDescriptor[Any]) -> None:
        def is_current() -> bool:
            return seq == self._seq

        try:
            async with self._status.track(f"query #{seq}", is_current=is_current):
                result = await self.fetch(descriptor)
        except Exception as exc:
            if is_current():
                self.results.fail(exc)
            return

        if not is_current():
            logger.debug(
                "%s: dropping stale result #%s (latest is #%s)",
                self._adapter.table,
                seq,
                self._seq,
            )
            return

        logger.debug(
            "%s: result #%s rows=%s total=%s",
            self._adapter.table,
            seq,
            len(result.rows),
            result.total_count,
        )
        self.results.emit(result)

    async def fetch(self, descriptor: QueryDescriptor[Any]) -> QueryResult[E]:
        """Build, send and map one page request. Raises on any failure."""
        page = descriptor.page
        sort = descriptor.sort

        query = self._store.table(self._adapter.table).select(self._adapter.list_columns, count="exact")
        query = self._adapter.apply_filter(query, descriptor.filter)
        query = query.order(sort.field.column, ascending=sort.ascending)
        query = query.range(page.offset, page.last_index)

        response = await query.execute()
        if response.count is None:
            raise CountUnavailableError("Could not get count")

        rows = tuple(self._adapter.from_row(row) for row in response.data)
        return QueryResult(
            rows=rows,
            total_count=response.count,
            page=page.page,
            page_size=page.page_size,
            total_pages=total_pages(response.count, page.page_size),
        )
