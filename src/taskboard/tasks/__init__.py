from .task_models import (
    CreateTaskRequest,
    Task,
    TaskFilter,
    TaskPriority,
    TaskSortField,
    TaskStatus,
    UpdateTaskRequest,
)
from .task_service import TaskService

__all__ = [
    "CreateTaskRequest",
    "Task",
    "TaskFilter",
    "TaskPriority",
    "TaskService",
    "TaskSortField",
    "TaskStatus",
    "UpdateTaskRequest",
]
