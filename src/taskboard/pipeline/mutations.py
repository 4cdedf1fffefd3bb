# src/taskboard/pipeline/mutations.py

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from ..core.ports import EntityAdapter, RowPayload, TableStore
from .status import OperationStatus

logger = logging.getLogger(__name__)

E = TypeVar("E")


class MutationGateway(Generic[E]):
    """
    Create / update / delete, one store write each.

    Loading and error are published on the shared OperationStatus; failures
    are re-raised to the caller. Nothing is re-queried afterwards: callers
    refresh the view themselves when they want to see the change.
    """

    def __init__(self, store: TableStore, adapter: EntityAdapter[E], status: OperationStatus) -> None:
        self._store = store
        self._adapter = adapter
        self._status = status

    async def create(self, payload: RowPayload) -> E:
        row = payload.to_row()
        async with self._status.track("create"):
            response = await self._store.table(self._adapter.table).insert(row).single().execute()
            entity = self._adapter.from_row(response.data[0])
        logger.info("%s: created id=%s", self._adapter.table, getattr(entity, "id", None))
        return entity

    async def update(self, entity_id: str, patch: RowPayload) -> E:
        """Send only the fields present in the patch; the rest stays untouched server-side."""
        fields = patch.to_row()
        async with self._status.track("update"):
            response = await (
                self._store.table(self._adapter.table).update(fields).eq("id", entity_id).single().execute()
            )
            entity = self._adapter.from_row(response.data[0])
        logger.info("%s: updated id=%s fields=%s", self._adapter.table, entity_id, sorted(fields))
        return entity

    async def delete(self, entity_id: str) -> None:
        async with self._status.track("delete"):
            await self._store.table(self._adapter.table).delete().eq("id", entity_id).execute()
        logger.info("%s: deleted id=%s", self._adapter.table, entity_id)
