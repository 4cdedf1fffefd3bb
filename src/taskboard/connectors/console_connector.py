# src/taskboard/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..categories.category_models import Category
from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..errors import error_message
from ..pipeline.executor import QueryResult
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def format_task_page(result: QueryResult[Task], labels: dict[str, str]) -> str:
    header = f"Tasks - page {result.page}/{max(result.total_pages, 1)} ({result.total_count} total)"
    if not result.rows:
        return header + "\n  (no tasks)"
    lines = [header]
    for t in result.rows:
        due = t.due_date.isoformat() if t.due_date else "-"
        label = labels.get(t.category_id or "", "")
        lines.append(f"  {t.id}  [{t.status.value:<11}] {t.priority.value:<6} {due}  {t.title}  ({label})")
    return "\n".join(lines)


def format_category_page(result: QueryResult[Category]) -> str:
    header = f"Categories - page {result.page}/{max(result.total_pages, 1)} ({result.total_count} total)"
    if not result.rows:
        return header + "\n  (no categories)"
    lines = [header]
    for c in result.rows:
        lines.append(f"  {c.id}  {c.title}  {c.color}  tasks={len(c.tasks)}")
    return "\n".join(lines)


class ConsoleView:
    """
    Renders whatever the pipelines publish. Holds no query logic:
    it subscribes to results/error streams and prints the latest state.
    """

    def __init__(self, state: AppState) -> None:
        self._state = state
        self._renders: set[asyncio.Task[None]] = set()
        self._unsubscribers = [
            state.tasks.results.subscribe(self._on_tasks, self._on_failure),
            state.categories.results.subscribe(self._on_categories, self._on_failure),
        ]

    def close(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    async def wait_rendered(self) -> None:
        while self._renders:
            await asyncio.gather(*list(self._renders), return_exceptions=True)

    def _on_tasks(self, result: QueryResult[Task]) -> None:
        # Category labels come from the shared cache, which may still need loading.
        task = asyncio.get_running_loop().create_task(self._render_tasks(result))
        self._renders.add(task)
        task.add_done_callback(self._renders.discard)

    async def _render_tasks(self, result: QueryResult[Task]) -> None:
        labels: dict[str, str] = {}
        for t in result.rows:
            if t.category_id and t.category_id not in labels:
                try:
                    labels[t.category_id] = await self._state.categories.label_for(t.category_id)
                except Exception:
                    logger.debug("Category lookup failed id=%s", t.category_id, exc_info=True)
                    labels[t.category_id] = "?"
        _print_ts(format_task_page(result, labels))

    def _on_categories(self, result: QueryResult[Category]) -> None:
        _print_ts(format_category_page(result))

    def _on_failure(self, exc: BaseException) -> None:
        _print_ts(f"[ERROR] {error_message(exc)}")


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    view = ConsoleView(state)
    state.start()

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                # Bare text is a title search, the console's equivalent of a search box.
                user_input = "/search " + user_input

            try:
                cmd_response = await command_registry.handle(state, user_input, emit=_print_ts)
            except Exception:
                logger.exception("Command handler crashed.")
                cmd_response = "Internal error while handling a command."

            if cmd_response:
                _print_ts(cmd_response)
    finally:
        view.close()

    logger.info("Console connector finished.")
