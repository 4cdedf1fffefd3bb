# src/taskboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- validates the store configuration (missing URL/key is fatal),
- ensures the local (gitignored) data directory exists,
- wires the REST store and the two entity services into AppState.
"""

from __future__ import annotations

import logging

import httpx

from ..categories.category_service import CategoryService
from ..config import Settings, get_settings
from ..core.state import AppState
from ..store.rest import RestStore
from ..tasks.task_service import TaskService

logger = logging.getLogger(__name__)


def create_initial_state(*, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the HTTP client) injectable makes the app easier to
    test and avoids hidden global config reads. Raises ConfigError when the
    store endpoint or key is missing.
    """
    if settings is None:
        settings = get_settings()

    store_url, store_key = settings.require_store()
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    store = RestStore(
        store_url,
        store_key,
        rest_path=settings.store_rest_path,
        timeout=settings.http_timeout_seconds,
        client=client,
    )

    state = AppState(
        settings=settings,
        store=store,
        tasks=TaskService(
            store,
            page_size=settings.page_size,
            debounce_seconds=settings.search_debounce_seconds,
        ),
        categories=CategoryService(
            store,
            page_size=settings.page_size,
            debounce_seconds=settings.search_debounce_seconds,
        ),
    )
    logger.debug("AppState wired (page_size=%s debounce=%sms)", settings.page_size, settings.search_debounce_ms)
    return state
