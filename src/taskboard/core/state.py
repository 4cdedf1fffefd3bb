# src/taskboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..categories.category_service import CategoryService
from ..store.rest import RestStore
from ..tasks.task_service import TaskService


@dataclass
class AppState:
    """Session-scoped state handed to the UI layer (built in cli.bootstrap)."""

    # Store Settings on the state for easy access in commands.
    settings: object

    store: RestStore
    tasks: TaskService
    categories: CategoryService

    def start(self) -> None:
        self.tasks.start()
        self.categories.start()

    async def close(self) -> None:
        self.tasks.close()
        self.categories.close()
        await self.tasks.wait_idle()
        await self.categories.wait_idle()
        await self.store.aclose()
