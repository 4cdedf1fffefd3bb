# src/taskboard/categories/category_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from ..core.values import UNSET, parse_date, parse_datetime
from ..tasks.task_models import TaskPriority, TaskStatus

DEFAULT_COLOR = "#2563eb"

COLOR_PRESETS: tuple[str, ...] = (
    "#2563eb",
    "#7c3aed",
    "#059669",
    "#ea580c",
    "#dc2626",
    "#0891b2",
    "#7c2d12",
    "#374151",
)

UNKNOWN_CATEGORY_LABEL = "Unknown category"
NO_CATEGORY_LABEL = "No category"


@dataclass(frozen=True, slots=True)
class TaskSummary:
    """Task fields embedded in a category listing."""

    id: str
    title: str
    status: TaskStatus
    due_date: date | None
    priority: TaskPriority


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    title: str
    description: str
    color: str
    created_at: datetime | None
    updated_at: datetime | None
    tasks: tuple[TaskSummary, ...] = ()


class CategorySortField(StrEnum):
    TITLE = "title"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        return "title" if self is CategorySortField.TITLE else "created_at"

    def sort_key(self, category: Category) -> Any:
        if self is CategorySortField.TITLE:
            return category.title
        created = category.created_at
        return (created is None, created.timestamp() if created else 0.0)

    @classmethod
    def parse(cls, raw: str) -> CategorySortField:
        key = raw.strip().replace("_", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"Unknown category sort field: {raw}")


@dataclass(frozen=True, slots=True)
class CategoryFilter:
    title: str | None = None


@dataclass(frozen=True, slots=True)
class CreateCategoryRequest:
    title: str
    description: str = ""
    color: str = DEFAULT_COLOR

    def to_row(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description or "",
            "color": self.color or DEFAULT_COLOR,
        }


@dataclass(frozen=True, slots=True)
class UpdateCategoryRequest:
    title: Any = UNSET
    description: Any = UNSET
    color: Any = UNSET

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {}
        if self.title is not UNSET:
            row["title"] = self.title
        if self.description is not UNSET:
            row["description"] = self.description
        if self.color is not UNSET:
            row["color"] = self.color
        return row


def _summary_from_row(row: dict[str, Any]) -> TaskSummary:
    return TaskSummary(
        id=str(row.get("id") or ""),
        title=str(row.get("title") or ""),
        status=TaskStatus.from_db(row.get("status")),
        due_date=parse_date(row.get("due_date")),
        priority=TaskPriority.from_db(row.get("priority")),
    )


def category_from_row(row: dict[str, Any]) -> Category:
    embedded = row.get("tasks") or []
    return Category(
        id=str(row["id"]),
        title=str(row.get("title") or ""),
        description=str(row.get("description") or ""),
        color=str(row.get("color") or DEFAULT_COLOR),
        created_at=parse_datetime(row.get("created_at")),
        updated_at=parse_datetime(row.get("updated_at")),
        tasks=tuple(_summary_from_row(t) for t in embedded if isinstance(t, dict)),
    )
