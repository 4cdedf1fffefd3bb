# tests/test_console.py

from __future__ import annotations

import asyncio

import pytest

from taskboard.connectors.console_connector import ConsoleView, format_category_page, format_task_page
from taskboard.core.state import AppState
from taskboard.pipeline.executor import QueryResult
from taskboard.tasks.task_models import Task

from .fakes import FakePostgrest


def test_empty_pages_render_placeholder() -> None:
    empty: QueryResult[Task] = QueryResult(rows=(), total_count=0, page=1, page_size=10, total_pages=0)

    assert format_task_page(empty, {}) == "Tasks - page 1/1 (0 total)\n  (no tasks)"
    assert format_category_page(empty).endswith("(no categories)")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_view_renders_labels(
    backend: FakePostgrest, state: AppState, capsys: pytest.CaptureFixture[str]
) -> None:
    work = backend.seed("categories", title="Work")
    backend.seed_task("Filed", category_id=work["id"])
    backend.seed_task("Dangling", category_id="cat-404")
    view = ConsoleView(state)

    state.start()
    await asyncio.sleep(0)
    await state.tasks.wait_idle()
    await state.categories.wait_idle()
    await view.wait_rendered()
    view.close()

    out = capsys.readouterr().out
    assert "Tasks - page 1/1 (2 total)" in out
    assert "Filed  (Work)" in out
    assert "Dangling  (Unknown category)" in out
    assert "Categories - page 1/1 (1 total)" in out
    assert "tasks=1" in out


@pytest.mark.asyncio
async def test_view_prints_failures(
    backend: FakePostgrest, state: AppState, capsys: pytest.CaptureFixture[str]
) -> None:
    backend.fail_if = lambda request: request.url.path.endswith("/tasks")
    view = ConsoleView(state)

    state.start()
    await asyncio.sleep(0)
    await state.tasks.wait_idle()
    await state.categories.wait_idle()
    view.close()

    assert "[ERROR] database unavailable" in capsys.readouterr().out
