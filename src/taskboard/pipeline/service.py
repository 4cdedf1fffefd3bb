# src/taskboard/pipeline/service.py

from __future__ import annotations

"""
Per-entity pipeline: the object the UI talks to.

Wiring (leaves first):
    ViewStateStore -> SearchDebouncer -> QueryComposer -> QueryExecutor -> results
plus MutationGateway, all sharing one OperationStatus.
"""

import logging
from typing import Any, Generic, TypeVar

from ..core.ports import EntityAdapter, RowPayload, TableStore
from ..core.reactive import Cell, Stream
from .composer import QueryComposer
from .debounce import SearchDebouncer
from .executor import QueryExecutor, QueryResult
from .mutations import MutationGateway
from .status import OperationStatus
from .view_state import PageSpec, SortSpec, ViewStateStore

logger = logging.getLogger(__name__)

E = TypeVar("E")
F = TypeVar("F")


class EntityPipeline(Generic[E, F]):
    def __init__(
        self,
        store: TableStore,
        adapter: EntityAdapter[E],
        *,
        filter_spec: F,
        sort: SortSpec[Any],
        pagination: PageSpec | None = None,
        debounce_seconds: float = 0.3,
    ) -> None:
        self._store = store
        self._adapter = adapter
        name = adapter.table

        self.status = OperationStatus(name)
        self.view: ViewStateStore[F, Any] = ViewStateStore(
            filter_spec=filter_spec,
            sort=sort,
            pagination=pagination or PageSpec(),
            name=name,
        )
        self.debouncer = SearchDebouncer(self.view, quiet_seconds=debounce_seconds)
        self.composer: QueryComposer[F] = QueryComposer(self.view)
        self.executor: QueryExecutor[E] = QueryExecutor(store, adapter, self.status)
        self.mutations: MutationGateway[E] = MutationGateway(store, adapter, self.status)

        self._unsubscribers = [
            self.composer.descriptors.subscribe(self.executor.submit),
            self.debouncer.settled.subscribe(self._on_search_settled),
        ]
        self._first_page_on_settle = False
        self._started = False

    # ---- streams exposed to the UI ----

    @property
    def results(self) -> Stream[QueryResult[E]]:
        return self.executor.results

    @property
    def loading(self) -> Cell[bool]:
        return self.status.loading

    @property
    def error(self) -> Cell[str | None]:
        return self.status.error

    @property
    def filter(self) -> Cell[F]:
        return self.view.filter

    @property
    def sort(self) -> Cell[SortSpec[Any]]:
        return self.view.sort

    @property
    def pagination(self) -> Cell[PageSpec]:
        return self.view.pagination

    # ---- lifecycle ----

    def start(self) -> None:
        """Begin composing; the first query for the defaults runs on the next loop turn."""
        if self._started:
            return
        self._started = True
        self.composer.start()
        logger.debug("%s pipeline started", self._adapter.table)

    def close(self) -> None:
        self.debouncer.close()
        self.composer.stop()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._started = False

    async def wait_idle(self) -> None:
        await self.executor.wait_idle()

    # ---- commands ----

    def set_filter(self, filter_spec: F) -> None:
        self.view.set_filter(filter_spec)

    def set_sort(self, sort: SortSpec[Any]) -> None:
        self.view.set_sort(sort)

    def set_pagination(self, pagination: PageSpec) -> None:
        self.view.set_pagination(pagination)

    def set_search(self, text: str, *, first_page: bool = False) -> None:
        """
        Push raw search text. With first_page, the page goes back to 1 together
        with the settled title merge, so both land in one query.
        """
        self._first_page_on_settle = first_page
        self.view.set_search(text)

    def _on_search_settled(self, _text: str) -> None:
        if not self._first_page_on_settle:
            return
        self._first_page_on_settle = False
        current = self.view.pagination.value
        if current.page != 1:
            self.view.set_pagination(PageSpec(page=1, page_size=current.page_size))

    def refresh(self) -> None:
        self.composer.refresh()

    # ---- reads / writes outside the paginated view ----

    async def get_by_id(self, entity_id: str) -> E:
        response = await self._store.table(self._adapter.table).select("*").eq("id", entity_id).single().execute()
        return self._adapter.from_row(response.data[0])

    async def create(self, payload: RowPayload) -> E:
        return await self.mutations.create(payload)

    async def update(self, entity_id: str, patch: RowPayload) -> E:
        return await self.mutations.update(entity_id, patch)

    async def delete(self, entity_id: str) -> None:
        await self.mutations.delete(entity_id)
