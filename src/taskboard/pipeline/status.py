# src/taskboard/pipeline/status.py

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager

from ..core.reactive import Cell
from ..errors import error_message

logger = logging.getLogger(__name__)


class OperationStatus:
    """
    Loading / error cells shared by every query and mutation of one entity type.

    loading is true while at least one operation is in flight; error holds the
    message of the last failed operation and is cleared when a new one starts.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.loading: Cell[bool] = Cell(False, name=f"{name}.loading")
        self.error: Cell[str | None] = Cell(None, name=f"{name}.error")
        self._in_flight = 0

    def begin(self) -> None:
        self._in_flight += 1
        if self.error.value is not None:
            self.error.set(None)
        if not self.loading.value:
            self.loading.set(True)

    def end(self) -> None:
        self._in_flight = max(0, self._in_flight - 1)
        if self._in_flight == 0 and self.loading.value:
            self.loading.set(False)

    def publish_error(self, exc: BaseException) -> None:
        self.error.set(error_message(exc))

    @asynccontextmanager
    async def track(
        self,
        operation: str,
        *,
        is_current: Callable[[], bool] | None = None,
    ) -> AsyncIterator[None]:
        """
        Scope one operation: begin, publish the error on failure, always end.

        The exception is re-raised. When is_current() says the operation has
        been superseded, its failure is not published to the error cell.
        """
        self.begin()
        try:
            yield
        except Exception as exc:
            if is_current is None or is_current():
                logger.error("%s: %s failed: %s", self.name, operation, error_message(exc))
                self.publish_error(exc)
            else:
                logger.debug("%s: superseded %s failed: %s", self.name, operation, exc)
            raise
        finally:
            self.end()
