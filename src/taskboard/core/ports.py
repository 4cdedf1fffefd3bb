# src/taskboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the pipeline.

The pipeline depends on Protocols instead of the concrete REST client and
entity modules. This keeps the store swappable and makes testing easier.
"""

from typing import Any, Protocol, TypeVar

from ..store.rest import StoreResponse

E = TypeVar("E")
E_co = TypeVar("E_co", covariant=True)


class Query(Protocol):
    """Chainable request builder (see store.rest.TableQuery)."""

    def select(self, columns: str = "*", *, count: str | None = None) -> Query: ...
    def insert(self, row: dict[str, Any]) -> Query: ...
    def update(self, patch: dict[str, Any]) -> Query: ...
    def delete(self) -> Query: ...
    def eq(self, column: str, value: Any) -> Query: ...
    def ilike(self, column: str, pattern: str) -> Query: ...
    def gte(self, column: str, value: Any) -> Query: ...
    def lte(self, column: str, value: Any) -> Query: ...
    def order(self, column: str, *, ascending: bool = True) -> Query: ...
    def range(self, start: int, end: int) -> Query: ...
    def single(self) -> Query: ...
    async def execute(self) -> StoreResponse: ...


class TableStore(Protocol):
    def table(self, name: str) -> Query: ...


class SortField(Protocol):
    """A member of a closed per-entity sort enumeration."""

    @property
    def column(self) -> str: ...

    def sort_key(self, entity: Any) -> Any: ...


class EntityAdapter(Protocol[E_co]):
    """
    Everything the generic pipeline needs to know about one table:
    where it lives, how a filter becomes predicates, how a row becomes an entity.
    """

    table: str
    list_columns: str

    def apply_filter(self, query: Query, filter_spec: Any) -> Query: ...
    def from_row(self, row: dict[str, Any]) -> E_co: ...


class RowPayload(Protocol):
    """Create/update request objects; to_row() returns only the fields to send."""

    def to_row(self) -> dict[str, Any]: ...
