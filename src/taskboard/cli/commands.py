# src/taskboard/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date
from enum import StrEnum
from typing import TypeVar, cast

from ..categories.category_models import (
    COLOR_PRESETS,
    DEFAULT_COLOR,
    CategoryFilter,
    CategorySortField,
    CreateCategoryRequest,
)
from ..core.state import AppState
from ..errors import AppError, error_message
from ..pipeline.view_state import PageSpec, SortDirection, SortSpec
from ..tasks.task_models import (
    CreateTaskRequest,
    TaskFilter,
    TaskPriority,
    TaskSortField,
    TaskStatus,
    UpdateTaskRequest,
)

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

EnumT = TypeVar("EnumT", bound=StrEnum)


class UsageError(AppError):
    """Bad command arguments; the message is shown to the user as-is."""


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                return await cast(CommandHandler3, handler)(state, args, emit)
            return await cast(CommandHandler2, handler)(state, args)
        except UsageError as e:
            return str(e)
        except AppError as e:
            # Query and mutation failures are also in the entity's error cell; cache loads are not.
            return f"Failed: {error_message(e)}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----


def split_options(args: list[str]) -> tuple[list[str], dict[str, str]]:
    """["Buy", "milk", "due=2024-05-01"] -> (["Buy", "milk"], {"due": "2024-05-01"})"""
    words: list[str] = []
    options: dict[str, str] = {}
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and key:
            options[key.lower()] = value
        else:
            words.append(arg)
    return words, options


def _norm(raw: str) -> str:
    return "".join(ch for ch in raw.lower() if ch.isalnum())


def parse_choice(enum_cls: type[EnumT], raw: str) -> EnumT:
    """Lenient enum parsing: "todo", "To Do" and "to-do" all mean TaskStatus.TODO."""
    for member in enum_cls:
        if _norm(member.value) == _norm(raw) or _norm(member.name) == _norm(raw):
            return member
    allowed = ", ".join(m.value for m in enum_cls)
    raise UsageError(f"Unknown value {raw!r}. Expected one of: {allowed}")


def parse_day(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError:
        raise UsageError(f"Bad date {raw!r}. Use YYYY-MM-DD.") from None


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise UsageError(f"Bad {what}: {raw!r}") from None


def _require_id(args: list[str], usage: str) -> str:
    if not args:
        raise UsageError(f"Usage: {usage}")
    return args[0]


def _first_page(state: AppState) -> None:
    current = state.tasks.pagination.value
    if current.page != 1:
        state.tasks.set_pagination(PageSpec(page=1, page_size=current.page_size))


# ---- commands ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_status(state: AppState, args: list[str]) -> str:
    lines = ["Status:"]
    for label, service in (("Tasks", state.tasks), ("Categories", state.categories)):
        page = service.pagination.value
        sort = service.sort.value
        lines.append(
            f"  {label}: loading={'yes' if service.loading.value else 'no'}"
            f" error={service.error.value or '-'}"
            f" page={page.page}/{page.page_size}"
            f" sort={sort.field.value} {sort.direction.value}"
        )
        lines.append(f"    filter: {service.filter.value}")
    return "\n".join(lines)


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    state.tasks.refresh()
    return "Loading tasks..."


async def cmd_categories(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /categories          -> reload the paginated category list
    /categories all      -> every category from the shared cache
    /categories reload   -> drop the cached snapshot
    """
    sub = args[0].lower() if args else ""

    if sub == "all":
        try:
            field = CategorySortField.parse(args[1]) if len(args) > 1 else CategorySortField.TITLE
        except ValueError as e:
            raise UsageError(str(e)) from None
        direction = SortDirection.parse(args[2] if len(args) > 2 else None)
        if emit is not None and not state.categories.all_categories.loaded:
            emit("Loading all categories...")
        items = await state.categories.sorted_categories(SortSpec(field, direction))
        if not items:
            return "No categories."
        return "\n".join(f"  {c.id}  {c.title}  {c.color}" for c in items)

    if sub == "reload":
        state.categories.invalidate_cache()
        return "Category cache dropped; next lookup reloads it."

    if sub == "search":
        state.categories.set_filter(CategoryFilter(title=" ".join(args[1:]) or None))
        return "Searching categories..."

    state.categories.refresh()
    return "Loading categories..."


async def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter status=Done priority=High category=<id> from=YYYY-MM-DD to=YYYY-MM-DD
    /filter clear
    """
    if not args:
        return f"Current filter: {state.tasks.filter.value}"

    if args[0].lower() == "clear":
        state.tasks.set_filter(TaskFilter())
        _first_page(state)
        return "Filter cleared."

    words, options = split_options(args)
    if words:
        raise UsageError(f"Unexpected arguments: {' '.join(words)}")

    current = state.tasks.filter.value
    state.tasks.set_filter(
        TaskFilter(
            status=parse_choice(TaskStatus, options["status"]) if options.get("status") else None,
            priority=parse_choice(TaskPriority, options["priority"]) if options.get("priority") else None,
            category_id=options.get("category") or None,
            title=options.get("title", current.title),
            date_from=parse_day(options["from"]) if options.get("from") else None,
            date_to=parse_day(options["to"]) if options.get("to") else None,
        )
    )
    _first_page(state)
    return "Filter applied."


async def cmd_search(state: AppState, args: list[str]) -> str:
    state.tasks.set_search(" ".join(args), first_page=True)
    return ""


async def cmd_sort(state: AppState, args: list[str]) -> str:
    if not args:
        allowed = ", ".join(f.value for f in TaskSortField)
        raise UsageError(f"Usage: /sort <field> [asc|desc]. Fields: {allowed}")
    try:
        field = TaskSortField.parse(args[0])
    except ValueError as e:
        raise UsageError(str(e)) from None
    direction = SortDirection.parse(args[1] if len(args) > 1 else None)
    state.tasks.set_sort(SortSpec(field, direction))
    return f"Sorting by {field.value} {direction.value}."


async def cmd_page(state: AppState, args: list[str]) -> str:
    if not args:
        raise UsageError("Usage: /page <n> [size]")
    current = state.tasks.pagination.value
    page = _parse_int(args[0], "page")
    size = _parse_int(args[1], "page size") if len(args) > 1 else current.page_size
    try:
        state.tasks.set_pagination(PageSpec(page=page, page_size=size))
    except ValueError as e:
        raise UsageError(str(e)) from None
    return ""


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title words> due=YYYY-MM-DD [priority=..] [status=..] [category=<id>] [desc=..]"""
    words, options = split_options(args)
    if not words or not options.get("due"):
        raise UsageError("Usage: /add <title> due=YYYY-MM-DD [priority=..] [status=..] [category=<id>]")

    task = await state.tasks.create(
        CreateTaskRequest(
            title=" ".join(words),
            due_date=parse_day(options["due"]),
            description=options.get("desc", ""),
            status=parse_choice(TaskStatus, options["status"]) if options.get("status") else TaskStatus.TODO,
            priority=(
                parse_choice(TaskPriority, options["priority"]) if options.get("priority") else TaskPriority.MEDIUM
            ),
            category_id=options.get("category") or None,
        )
    )
    state.tasks.refresh()
    return f"Created task {task.id}: {task.title}"


async def cmd_set(state: AppState, args: list[str]) -> str:
    """/set <id> [title=..] [status=..] [priority=..] [due=..] [category=<id>|none] [desc=..]"""
    task_id = _require_id(args, "/set <id> key=value ...")
    _, options = split_options(args[1:])
    if not options:
        raise UsageError("Nothing to update.")

    fields: dict[str, object] = {}
    if "title" in options:
        fields["title"] = options["title"].replace("_", " ")
    if "desc" in options:
        fields["description"] = options["desc"].replace("_", " ")
    if "status" in options:
        fields["status"] = parse_choice(TaskStatus, options["status"])
    if "priority" in options:
        fields["priority"] = parse_choice(TaskPriority, options["priority"])
    if "due" in options:
        fields["due_date"] = parse_day(options["due"])
    if "category" in options:
        raw = options["category"]
        fields["category_id"] = None if raw.lower() in ("", "none", "-") else raw

    task = await state.tasks.update(task_id, UpdateTaskRequest(**fields))
    state.tasks.refresh()
    return f"Updated task {task.id}."


async def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _require_id(args, "/rm <id>")
    await state.tasks.delete(task_id)
    state.tasks.refresh()
    return f"Deleted task {task_id}."


async def cmd_cat_add(state: AppState, args: list[str]) -> str:
    color = DEFAULT_COLOR
    words = list(args)
    if words and words[-1].startswith("#"):
        color = words.pop()
    if not words:
        presets = " ".join(COLOR_PRESETS)
        raise UsageError(f"Usage: /cat-add <title> [#color]. Presets: {presets}")
    category = await state.categories.create(CreateCategoryRequest(title=" ".join(words), color=color))
    state.categories.refresh()
    return f"Created category {category.id}: {category.title}"


async def cmd_cat_rm(state: AppState, args: list[str]) -> str:
    category_id = _require_id(args, "/cat-rm <id>")
    await state.categories.delete(category_id)
    # Task labels resolve through the snapshot; drop it so the deleted id shows as unknown.
    state.categories.invalidate_cache()
    state.categories.refresh()
    state.tasks.refresh()
    return f"Deleted category {category_id}. Tasks pointing at it now show as unknown."


async def cmd_refresh(state: AppState, args: list[str]) -> str:
    state.tasks.refresh()
    state.categories.refresh()
    return ""


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show loading/error state and the current views.")
registry.register("tasks", cmd_tasks, help_text="Reload the current task page.")
registry.register(
    "categories",
    cmd_categories,
    help_text="Category views: /categories | /categories all [field] [dir] | /categories search <text> | /categories reload.",
    aliases=["cats"],
)
registry.register("filter", cmd_filter, help_text="Filter tasks: /filter status=.. priority=.. category=.. from=.. to=.. | clear.")
registry.register("search", cmd_search, help_text="Search task titles (debounced): /search <text>.")
registry.register("sort", cmd_sort, help_text="Sort tasks: /sort title|dueDate|status|createdAt [asc|desc].")
registry.register("page", cmd_page, help_text="Go to a page: /page <n> [size].")
registry.register("add", cmd_add, help_text="Create a task: /add <title> due=YYYY-MM-DD [priority=..].")
registry.register("set", cmd_set, help_text="Update task fields: /set <id> status=Done ...")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.")
registry.register("cat-add", cmd_cat_add, help_text="Create a category: /cat-add <title> [#color].")
registry.register("cat-rm", cmd_cat_rm, help_text="Delete a category: /cat-rm <id>.")
registry.register("refresh", cmd_refresh, help_text="Re-run the current task and category queries.")
