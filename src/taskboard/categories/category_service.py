# src/taskboard/categories/category_service.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import Query, TableStore
from ..pipeline.cache import EntityCache
from ..pipeline.service import EntityPipeline
from ..pipeline.view_state import PageSpec, SortDirection, SortSpec, sort_entities
from .category_models import (
    NO_CATEGORY_LABEL,
    UNKNOWN_CATEGORY_LABEL,
    Category,
    CategoryFilter,
    CategorySortField,
    category_from_row,
)

logger = logging.getLogger(__name__)


class CategoryAdapter:
    table = "categories"
    # Listing pages carry a summary of each category's tasks.
    list_columns = "*, tasks (id, title, status, due_date, priority)"
    # Order of the full, unpaginated snapshot.
    default_order = "title"

    def apply_filter(self, query: Query, filter_spec: CategoryFilter) -> Query:
        if filter_spec.title:
            query = query.ilike("title", f"%{filter_spec.title}%")
        return query

    def from_row(self, row: dict[str, Any]) -> Category:
        return category_from_row(row)


CATEGORIES = CategoryAdapter()

DEFAULT_CATEGORY_SORT: SortSpec[CategorySortField] = SortSpec(CategorySortField.TITLE, SortDirection.ASC)


class CategoryService(EntityPipeline[Category, CategoryFilter]):
    def __init__(
        self,
        store: TableStore,
        *,
        page_size: int = 10,
        debounce_seconds: float = 0.3,
    ) -> None:
        super().__init__(
            store,
            CATEGORIES,
            filter_spec=CategoryFilter(),
            sort=DEFAULT_CATEGORY_SORT,
            pagination=PageSpec(page=1, page_size=page_size),
            debounce_seconds=debounce_seconds,
        )
        self.all_categories: EntityCache[Category] = EntityCache(self._load_all, name="categories.all")

    async def _load_all(self) -> list[Category]:
        response = await (
            self._store.table(CATEGORIES.table).select("*").order(CATEGORIES.default_order, ascending=True).execute()
        )
        return [category_from_row(row) for row in response.data]

    async def get_all_categories(self) -> tuple[Category, ...]:
        """Whole collection, loaded once and shared. Not refreshed by mutations."""
        return await self.all_categories.get_all()

    def invalidate_cache(self) -> None:
        self.all_categories.invalidate()

    async def find_cached(self, category_id: str | None) -> Category | None:
        if not category_id:
            return None
        for category in await self.get_all_categories():
            if category.id == category_id:
                return category
        return None

    async def label_for(self, category_id: str | None) -> str:
        """
        Display name for a task's category reference.

        Deleting a category does not touch its tasks, so the id may dangle;
        that shows up here as the unknown-category fallback.
        """
        if not category_id:
            return NO_CATEGORY_LABEL
        category = await self.find_cached(category_id)
        return category.title if category is not None else UNKNOWN_CATEGORY_LABEL

    async def sorted_categories(self, sort: SortSpec[CategorySortField]) -> list[Category]:
        return sort_entities(await self.get_all_categories(), sort)
