# src/taskboard/pipeline/debounce.py

from __future__ import annotations

import asyncio
import dataclasses
import logging
from typing import Any

from ..core.reactive import Stream
from .view_state import ViewStateStore

logger = logging.getLogger(__name__)

_NOTHING: Any = object()


class SearchDebouncer:
    """
    Turn raw search keystrokes into settled title filters.

    - Every new text restarts the quiet window (timer on the running loop).
    - When the window elapses, the text is merged into the *current* filter,
      so edits made to other filter fields in the meantime are kept.
    - A settled text equal to the previous settled text is dropped.
    - Each merged text is then published on `settled`, in the same loop turn.
    """

    def __init__(self, view: ViewStateStore[Any, Any], *, quiet_seconds: float = 0.3) -> None:
        self._view = view
        self._quiet_s = max(0.0, float(quiet_seconds))
        self._timer: asyncio.TimerHandle | None = None
        self._last_settled: Any = _NOTHING
        self.settled: Stream[str] = Stream(name=f"{view.name}.search.settled")
        self._unsubscribe = view.search.subscribe(self.push)

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def push(self, text: str) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._quiet_s, self._settle, text)

    def _settle(self, text: str) -> None:
        self._timer = None
        if text == self._last_settled:
            logger.debug("%s: search unchanged (%r), skipping", self._view.name, text)
            return
        self._last_settled = text

        current = self._view.filter.value
        self._view.set_filter(dataclasses.replace(current, title=text))
        logger.debug("%s: search settled %r", self._view.name, text)
        self.settled.emit(text)

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._unsubscribe()
