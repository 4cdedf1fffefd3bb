# src/taskboard/pipeline/view_state.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from ..core.ports import SortField
from ..core.reactive import Cell, Stream

logger = logging.getLogger(__name__)

F = TypeVar("F")
S = TypeVar("S", bound=SortField)


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | None) -> SortDirection:
        if not raw:
            return cls.ASC
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ASC


@dataclass(frozen=True, slots=True)
class SortSpec(Generic[S]):
    field: S
    direction: SortDirection = SortDirection.ASC

    @property
    def ascending(self) -> bool:
        return self.direction is SortDirection.ASC


@dataclass(frozen=True, slots=True)
class PageSpec:
    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def last_index(self) -> int:
        """Inclusive index of the last row in the window."""
        return self.offset + self.page_size - 1


def sort_entities(items: Iterable[Any], sort: SortSpec[Any]) -> list[Any]:
    """Order entities locally using the sort field's own comparator key."""
    return sorted(items, key=sort.field.sort_key, reverse=not sort.ascending)


class ViewStateStore(Generic[F, S]):
    """
    Current filter / sort / pagination of one entity view, plus raw search text.

    Each cell holds exactly one value and is replaced atomically by its setter.
    No validation and no implicit page reset: callers decide whether a new
    filter should also go back to page 1.
    """

    def __init__(self, *, filter_spec: F, sort: SortSpec[S], pagination: PageSpec, name: str = "view") -> None:
        self.name = name
        self.filter: Cell[F] = Cell(filter_spec, name=f"{name}.filter")
        self.sort: Cell[SortSpec[S]] = Cell(sort, name=f"{name}.sort")
        self.pagination: Cell[PageSpec] = Cell(pagination, name=f"{name}.pagination")
        # No current value: raw keystrokes are events, the settled text lives in the filter.
        self.search: Stream[str] = Stream(name=f"{name}.search")

    def set_filter(self, filter_spec: F) -> None:
        logger.debug("%s: filter <- %s", self.name, filter_spec)
        self.filter.set(filter_spec)

    def set_sort(self, sort: SortSpec[S]) -> None:
        logger.debug("%s: sort <- %s %s", self.name, sort.field, sort.direction)
        self.sort.set(sort)

    def set_pagination(self, pagination: PageSpec) -> None:
        logger.debug("%s: page <- %s/%s", self.name, pagination.page, pagination.page_size)
        self.pagination.set(pagination)

    def set_search(self, text: str) -> None:
        self.search.emit(text)
