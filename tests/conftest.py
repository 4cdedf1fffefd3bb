# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskboard.categories.category_service import CategoryService
from taskboard.core.state import AppState
from taskboard.store.rest import RestStore
from taskboard.tasks.task_service import TaskService

from .fakes import FakePostgrest

# Short enough to keep the suite fast, long enough to separate "burst" from "settled".
DEBOUNCE_S = 0.05


@pytest.fixture()
def backend() -> FakePostgrest:
    return FakePostgrest()


@pytest.fixture()
def store(backend: FakePostgrest) -> RestStore:
    return backend.store()


@pytest.fixture()
def tasks(store: RestStore) -> TaskService:
    return TaskService(store, debounce_seconds=DEBOUNCE_S)


@pytest.fixture()
def categories(store: RestStore) -> CategoryService:
    return CategoryService(store, debounce_seconds=DEBOUNCE_S)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object for AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        data_dir=tmp_path,
        page_size=10,
        search_debounce_ms=int(DEBOUNCE_S * 1000),
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: RestStore, tasks: TaskService, categories: CategoryService) -> AppState:
    """
    AppState wired to the in-memory store.

    NOTE: the real RestStore is kept (only the HTTP transport is faked) because
    request building is part of what we want to test.
    """
    return AppState(settings=settings, store=store, tasks=tasks, categories=categories)
