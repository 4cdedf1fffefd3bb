# tests/test_mutations.py

from __future__ import annotations

import asyncio
import json
from datetime import date

import pytest

from taskboard.categories.category_models import UpdateCategoryRequest
from taskboard.categories.category_service import CategoryService
from taskboard.errors import StoreError
from taskboard.tasks.task_models import (
    CreateTaskRequest,
    TaskFilter,
    TaskPriority,
    TaskStatus,
    UpdateTaskRequest,
)
from taskboard.tasks.task_service import TaskService

from .fakes import FakePostgrest, hold_while, until


@pytest.mark.asyncio
async def test_create_returns_stored_entity(backend: FakePostgrest, tasks: TaskService) -> None:
    created = await tasks.create(
        CreateTaskRequest(title="Write report", due_date=date(2024, 7, 1), priority=TaskPriority.HIGH)
    )

    assert created.id.startswith("tas-")
    assert created.title == "Write report"
    assert created.due_date == date(2024, 7, 1)
    assert created.status is TaskStatus.TODO
    assert created.priority is TaskPriority.HIGH

    (request,) = backend.calls("POST", "tasks")
    assert json.loads(request.content) == {
        "title": "Write report",
        "description": "",
        "due_date": "2024-07-01",
        "status": "To Do",
        "priority": "High",
        "category_id": None,
    }
    assert request.headers["Prefer"] == "return=representation"


@pytest.mark.asyncio
async def test_mutation_does_not_requery_until_refresh(backend: FakePostgrest, tasks: TaskService) -> None:
    first = tasks.results.next()
    tasks.start()
    assert (await first).total_count == 0

    await tasks.create(CreateTaskRequest(title="New", due_date=date(2024, 7, 1)))
    await asyncio.sleep(0.01)
    assert len(backend.calls("GET", "tasks")) == 1

    refreshed = tasks.results.next()
    tasks.refresh()
    result = await refreshed

    assert [t.title for t in result.rows] == ["New"]
    assert len(backend.calls("GET", "tasks")) == 2


@pytest.mark.asyncio
async def test_partial_update_sends_only_present_fields(backend: FakePostgrest, tasks: TaskService) -> None:
    row = backend.seed_task("Draft", priority="Low", description="keep me")

    updated = await tasks.update(row["id"], UpdateTaskRequest(status=TaskStatus.IN_PROGRESS))

    (request,) = backend.calls("PATCH", "tasks")
    assert json.loads(request.content) == {"status": "In Progress"}
    assert request.url.params["id"] == f"eq.{row['id']}"
    assert updated.status is TaskStatus.IN_PROGRESS
    assert updated.priority is TaskPriority.LOW
    assert updated.description == "keep me"


@pytest.mark.asyncio
async def test_update_can_clear_category(backend: FakePostgrest, tasks: TaskService) -> None:
    row = backend.seed_task("Filed", category_id="cat-1")

    updated = await tasks.update(row["id"], UpdateTaskRequest(category_id=None))

    assert json.loads(backend.calls("PATCH", "tasks")[0].content) == {"category_id": None}
    assert updated.category_id is None


@pytest.mark.asyncio
async def test_update_missing_row_raises(tasks: TaskService) -> None:
    with pytest.raises(StoreError) as excinfo:
        await tasks.update("tas-404", UpdateTaskRequest(title="x"))

    assert excinfo.value.code == "PGRST116"
    assert tasks.error.value is not None


@pytest.mark.asyncio
async def test_category_update_keeps_unset_fields(backend: FakePostgrest, categories: CategoryService) -> None:
    row = backend.seed("categories", title="Work", color="#dc2626")

    updated = await categories.update(row["id"], UpdateCategoryRequest(title="Office"))

    assert json.loads(backend.calls("PATCH", "categories")[0].content) == {"title": "Office"}
    assert updated.title == "Office"
    assert updated.color == "#dc2626"


@pytest.mark.asyncio
async def test_delete_removes_row(backend: FakePostgrest, tasks: TaskService) -> None:
    row = backend.seed_task("Gone")
    backend.seed_task("Stays")

    await tasks.delete(row["id"])

    assert [r["title"] for r in backend.tables["tasks"]] == ["Stays"]
    assert backend.calls("DELETE", "tasks")[0].url.params["id"] == f"eq.{row['id']}"


@pytest.mark.asyncio
async def test_deleting_category_leaves_its_tasks(backend: FakePostgrest, categories: CategoryService) -> None:
    work = backend.seed("categories", title="Work")
    backend.seed_task("Orphan", category_id=work["id"])

    await categories.delete(work["id"])

    assert backend.tables["categories"] == []
    assert backend.tables["tasks"][0]["category_id"] == work["id"]
    assert await categories.label_for(work["id"]) == "Unknown category"


@pytest.mark.asyncio
async def test_failed_write_sets_error_and_raises(backend: FakePostgrest, tasks: TaskService) -> None:
    backend.fail_if = lambda request: request.method == "DELETE"

    with pytest.raises(StoreError):
        await tasks.delete("tas-1")

    assert tasks.error.value == "database unavailable"
    assert tasks.loading.value is False


@pytest.mark.asyncio
async def test_loading_is_on_while_write_is_in_flight(backend: FakePostgrest, tasks: TaskService) -> None:
    release = asyncio.Event()
    backend.gate = hold_while(release, lambda request: request.method == "POST")

    pending = asyncio.create_task(tasks.create(CreateTaskRequest(title="Slow", due_date=date(2024, 7, 1))))
    await until(lambda: len(backend.calls("POST", "tasks")) == 1)
    assert tasks.loading.value is True

    release.set()
    await pending

    assert tasks.loading.value is False


@pytest.mark.asyncio
async def test_get_by_id(backend: FakePostgrest, tasks: TaskService) -> None:
    row = backend.seed_task("Find me")

    task = await tasks.get_by_id(row["id"])

    assert task.title == "Find me"
    with pytest.raises(StoreError):
        await tasks.get_by_id("tas-404")


@pytest.mark.asyncio
async def test_tasks_by_category(backend: FakePostgrest, tasks: TaskService) -> None:
    backend.seed_task("One", category_id="cat-1")
    backend.seed_task("Two", category_id="cat-1")
    backend.seed_task("Other", category_id="cat-2")

    found = await tasks.get_tasks_by_category("cat-1")

    assert sorted(t.title for t in found) == ["One", "Two"]


@pytest.mark.asyncio
async def test_created_task_reads_back_through_matching_filter(backend: FakePostgrest, tasks: TaskService) -> None:
    backend.seed_task("Quarterly draft", status="Done", priority="Low", category_id="cat-7")
    backend.seed_task("Weekly numbers", status="Done", priority="High", category_id="cat-7")
    first = tasks.results.next()
    tasks.start()
    await first

    payload = CreateTaskRequest(
        title="Quarterly numbers",
        due_date=date(2024, 9, 30),
        description="Collect figures from finance",
        status=TaskStatus.DONE,
        priority=TaskPriority.HIGH,
        category_id="cat-7",
    )
    created = await tasks.create(payload)

    requeried = tasks.results.next()
    tasks.set_filter(
        TaskFilter(
            status=TaskStatus.DONE,
            priority=TaskPriority.HIGH,
            category_id="cat-7",
            title="quarterly",
            date_from=date(2024, 9, 30),
            date_to=date(2024, 9, 30),
        )
    )
    result = await requeried

    assert result.total_count == 1
    (row,) = result.rows
    assert row.id == created.id
    assert row.title == payload.title
    assert row.due_date == payload.due_date
    assert row.description == payload.description
    assert row.status is payload.status
    assert row.priority is payload.priority
    assert row.category_id == payload.category_id
    assert row.created_at is not None and row.updated_at is not None
