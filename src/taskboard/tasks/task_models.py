# src/taskboard/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.values import UNSET, date_to_wire, parse_date, parse_datetime


class TaskStatus(StrEnum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(raw)
        except ValueError:
            return cls.TODO


class TaskPriority(StrEnum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskPriority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    due_date: date | None
    status: TaskStatus
    priority: TaskPriority
    category_id: str | None
    created_at: datetime | None
    updated_at: datetime | None


class TaskSortField(StrEnum):
    """Closed set of sortable task fields; each knows its column and its own key."""

    TITLE = "title"
    DUE_DATE = "dueDate"
    STATUS = "status"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        return _TASK_SORT_COLUMNS[self]

    def sort_key(self, task: Task) -> Any:
        if self is TaskSortField.TITLE:
            return task.title
        if self is TaskSortField.DUE_DATE:
            return (task.due_date is None, task.due_date or date.min)
        if self is TaskSortField.STATUS:
            # The store orders the text column, so "Done" < "In Progress" < "To Do".
            return task.status.value
        return (task.created_at is None, task.created_at.timestamp() if task.created_at else 0.0)

    @classmethod
    def parse(cls, raw: str) -> TaskSortField:
        key = raw.strip().replace("_", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown task sort field: {raw}")


_TASK_SORT_COLUMNS = {
    TaskSortField.TITLE: "title",
    TaskSortField.DUE_DATE: "due_date",
    TaskSortField.STATUS: "status",
    TaskSortField.CREATED_AT: "created_at",
}


@dataclass(frozen=True, slots=True)
class TaskFilter:
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category_id: str | None = None
    title: str | None = None
    date_from: date | None = None
    date_to: date | None = None


@dataclass(frozen=True, slots=True)
class CreateTaskRequest:
    title: str
    due_date: date
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    category_id: str | None = None

    def to_row(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description or "",
            "due_date": date_to_wire(self.due_date),
            "status": (self.status or TaskStatus.TODO).value,
            "priority": (self.priority or TaskPriority.MEDIUM).value,
            "category_id": self.category_id or None,
        }


@dataclass(frozen=True, slots=True)
class UpdateTaskRequest:
    """Partial update: fields left as UNSET are not sent. category_id=None clears it."""

    title: Any = UNSET
    description: Any = UNSET
    due_date: Any = UNSET
    status: Any = UNSET
    priority: Any = UNSET
    category_id: Any = UNSET

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {}
        if self.title is not UNSET:
            row["title"] = self.title
        if self.description is not UNSET:
            row["description"] = self.description
        if self.due_date is not UNSET:
            row["due_date"] = date_to_wire(self.due_date)
        if self.status is not UNSET:
            row["status"] = TaskStatus(self.status).value
        if self.priority is not UNSET:
            row["priority"] = TaskPriority(self.priority).value
        if self.category_id is not UNSET:
            row["category_id"] = self.category_id
        return row


def task_from_row(row: dict[str, Any]) -> Task:
    category_id = row.get("category_id")
    return Task(
        id=str(row["id"]),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        due_date=parse_date(row.get("due_date")),
        status=TaskStatus.from_db(row.get("status")),
        priority=TaskPriority.from_db(row.get("priority")),
        category_id=str(category_id) if category_id else None,
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
    )
