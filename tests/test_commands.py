# tests/test_commands.py

from __future__ import annotations

import asyncio
from datetime import date

import pytest

from taskboard.cli.commands import CommandRegistry, UsageError, parse_choice, registry, split_options
from taskboard.core.state import AppState
from taskboard.errors import StoreError
from taskboard.pipeline.view_state import PageSpec, SortDirection, SortSpec
from taskboard.tasks.task_models import TaskFilter, TaskPriority, TaskSortField, TaskStatus

from .conftest import DEBOUNCE_S
from .fakes import FakePostgrest


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    async def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    assert await reg.handle(state, "/a x y") == "h2:x,y"
    assert await reg.handle(state, "/BEE", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_usage_and_app_errors_become_replies(state: AppState) -> None:
    reg = CommandRegistry()

    async def bad_usage(state, args):
        raise UsageError("Usage: /x <n>")

    async def store_down(state, args):
        raise StoreError("  ")

    reg.register("x", bad_usage, "x")
    reg.register("y", store_down, "y")

    assert await reg.handle(state, "/x") == "Usage: /x <n>"
    assert await reg.handle(state, "/y") == "Failed: Unknown error occurred"


def test_split_options() -> None:
    words, options = split_options(["Buy", "milk", "due=2024-05-01", "Priority=high", "=odd"])
    assert words == ["Buy", "milk", "=odd"]
    assert options == {"due": "2024-05-01", "priority": "high"}


@pytest.mark.parametrize("raw", ["todo", "To Do", "to-do", "TODO"])
def test_parse_choice_is_lenient(raw: str) -> None:
    assert parse_choice(TaskStatus, raw) is TaskStatus.TODO


def test_parse_choice_rejects_unknown() -> None:
    with pytest.raises(UsageError, match="Expected one of: Low, Medium, High"):
        parse_choice(TaskPriority, "urgent")


def test_help_lists_commands() -> None:
    text = registry.build_help()
    for name in ("/tasks", "/filter", "/search", "/sort", "/page", "/categories"):
        assert name in text


@pytest.mark.asyncio
async def test_filter_sets_filter_and_returns_to_first_page(state: AppState) -> None:
    state.tasks.set_pagination(PageSpec(page=4))

    reply = await registry.handle(state, "/filter status=done priority=high from=2024-05-01 category=cat-2")

    assert reply == "Filter applied."
    assert state.tasks.filter.value == TaskFilter(
        status=TaskStatus.DONE,
        priority=TaskPriority.HIGH,
        category_id="cat-2",
        date_from=date(2024, 5, 1),
    )
    assert state.tasks.pagination.value.page == 1


@pytest.mark.asyncio
async def test_filter_rejects_bad_date(state: AppState) -> None:
    reply = await registry.handle(state, "/filter from=05/01/2024")

    assert reply is not None and "YYYY-MM-DD" in reply
    assert state.tasks.filter.value == TaskFilter()


@pytest.mark.asyncio
async def test_sort_and_page(state: AppState) -> None:
    assert await registry.handle(state, "/sort due_date desc") == "Sorting by dueDate desc."
    assert state.tasks.sort.value == SortSpec(TaskSortField.DUE_DATE, SortDirection.DESC)

    await registry.handle(state, "/page 2 5")
    assert state.tasks.pagination.value == PageSpec(page=2, page_size=5)

    reply = await registry.handle(state, "/page 0")
    assert reply is not None and "page must be >= 1" in reply


@pytest.mark.asyncio
async def test_search_merges_after_quiet_window(state: AppState) -> None:
    state.tasks.set_filter(TaskFilter(status=TaskStatus.TODO))

    await registry.handle(state, "/search weekly report")
    assert state.tasks.filter.value.title is None

    await asyncio.sleep(DEBOUNCE_S * 3)
    assert state.tasks.filter.value == TaskFilter(status=TaskStatus.TODO, title="weekly report")


@pytest.mark.asyncio
async def test_add_set_rm_round_trip(backend: FakePostgrest, state: AppState) -> None:
    reply = await registry.handle(state, "/add Buy milk due=2024-05-01 priority=low")
    assert reply is not None and reply.startswith("Created task tas-")
    task_id = backend.tables["tasks"][0]["id"]

    assert await registry.handle(state, f"/set {task_id} status=in-progress category=none") == f"Updated task {task_id}."
    row = backend.tables["tasks"][0]
    assert (row["status"], row["priority"], row["category_id"]) == ("In Progress", "Low", None)

    assert await registry.handle(state, f"/rm {task_id}") == f"Deleted task {task_id}."
    assert backend.tables["tasks"] == []
    await asyncio.sleep(0)
    await state.tasks.wait_idle()


@pytest.mark.asyncio
async def test_failed_mutation_is_reported(backend: FakePostgrest, state: AppState) -> None:
    backend.fail_if = lambda request: request.method == "POST"

    reply = await registry.handle(state, "/cat-add Garden #059669")

    assert reply == "Failed: database unavailable"
    assert state.categories.error.value == "database unavailable"


@pytest.mark.asyncio
async def test_categories_all_announces_first_load(backend: FakePostgrest, state: AppState) -> None:
    backend.seed("categories", title="Work", color="#dc2626")
    notes: list[str] = []

    first = await registry.handle(state, "/categories all", emit=notes.append)
    second = await registry.handle(state, "/cats all title desc", emit=notes.append)

    assert notes == ["Loading all categories..."]
    assert first is not None and "Work" in first and "#dc2626" in first
    assert second == first
    assert len(backend.calls("GET", "categories")) == 1


@pytest.mark.asyncio
async def test_categories_all_rejects_unknown_sort(state: AppState) -> None:
    reply = await registry.handle(state, "/categories all colour")

    assert reply == "Unknown category sort field: colour"


@pytest.mark.asyncio
async def test_cat_rm_shows_tasks_as_unknown(backend: FakePostgrest, state: AppState) -> None:
    work = backend.seed("categories", title="Work")
    backend.seed_task("Report", category_id=work["id"])
    assert await state.categories.label_for(work["id"]) == "Work"

    reply = await registry.handle(state, f"/cat-rm {work['id']}")

    assert reply is not None and reply.startswith(f"Deleted category {work['id']}.")
    assert await state.categories.label_for(work["id"]) == "Unknown category"
    await asyncio.sleep(0)
    await state.tasks.wait_idle()
    await state.categories.wait_idle()


@pytest.mark.asyncio
async def test_search_from_later_page_sends_one_query(backend: FakePostgrest, state: AppState) -> None:
    for i in range(1, 16):
        backend.seed_task(f"T{i:02d}")
    state.tasks.set_pagination(PageSpec(page=2))
    first = state.tasks.results.next()
    state.tasks.start()
    assert (await first).page == 2
    before = len(backend.calls("GET", "tasks"))

    await registry.handle(state, "/search T1")
    await asyncio.sleep(DEBOUNCE_S / 5)
    # Nothing moves until the text settles.
    assert state.tasks.pagination.value.page == 2
    assert len(backend.calls("GET", "tasks")) == before

    settled = state.tasks.results.next()
    result = await settled

    assert result.page == 1
    assert [t.title for t in result.rows] == [f"T{i}" for i in range(10, 16)]
    requests = backend.calls("GET", "tasks")
    assert len(requests) == before + 1
    params = requests[-1].url.params.multi_items()
    assert ("title", "ilike.%T1%") in params
    assert ("offset", "0") in params


@pytest.mark.asyncio
async def test_categories_all_failure_is_reported(backend: FakePostgrest, state: AppState) -> None:
    backend.fail_if = lambda request: True

    reply = await registry.handle(state, "/categories all")

    assert reply == "Failed: database unavailable"
    # The snapshot load is not a tracked view query.
    assert state.categories.error.value is None
    assert not state.categories.all_categories.loaded
