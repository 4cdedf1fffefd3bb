from .category_models import (
    COLOR_PRESETS,
    DEFAULT_COLOR,
    Category,
    CategoryFilter,
    CategorySortField,
    CreateCategoryRequest,
    TaskSummary,
    UpdateCategoryRequest,
)
from .category_service import CategoryService

__all__ = [
    "COLOR_PRESETS",
    "DEFAULT_COLOR",
    "Category",
    "CategoryFilter",
    "CategoryService",
    "CategorySortField",
    "CreateCategoryRequest",
    "TaskSummary",
    "UpdateCategoryRequest",
]
