# src/taskboard/tasks/task_service.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import Query, TableStore
from ..core.values import date_to_wire
from ..pipeline.service import EntityPipeline
from ..pipeline.view_state import PageSpec, SortDirection, SortSpec
from .task_models import Task, TaskFilter, TaskSortField, task_from_row

logger = logging.getLogger(__name__)


class TaskAdapter:
    table = "tasks"
    list_columns = "*"

    def apply_filter(self, query: Query, filter_spec: TaskFilter) -> Query:
        """Empty predicates are skipped; an empty filter means no constraint."""
        if filter_spec.status:
            query = query.eq("status", filter_spec.status.value)
        if filter_spec.priority:
            query = query.eq("priority", filter_spec.priority.value)
        if filter_spec.category_id:
            query = query.eq("category_id", filter_spec.category_id)
        if filter_spec.title:
            query = query.ilike("title", f"%{filter_spec.title}%")
        if filter_spec.date_from:
            query = query.gte("due_date", date_to_wire(filter_spec.date_from))
        if filter_spec.date_to:
            query = query.lte("due_date", date_to_wire(filter_spec.date_to))
        return query

    def from_row(self, row: dict[str, Any]) -> Task:
        return task_from_row(row)


TASKS = TaskAdapter()

DEFAULT_TASK_SORT: SortSpec[TaskSortField] = SortSpec(TaskSortField.TITLE, SortDirection.ASC)


class TaskService(EntityPipeline[Task, TaskFilter]):
    def __init__(
        self,
        store: TableStore,
        *,
        page_size: int = 10,
        debounce_seconds: float = 0.3,
    ) -> None:
        super().__init__(
            store,
            TASKS,
            filter_spec=TaskFilter(),
            sort=DEFAULT_TASK_SORT,
            pagination=PageSpec(page=1, page_size=page_size),
            debounce_seconds=debounce_seconds,
        )

    async def get_tasks_by_category(self, category_id: str) -> list[Task]:
        response = await self._store.table(TASKS.table).select("*").eq("category_id", category_id).execute()
        return [task_from_row(row) for row in response.data]
