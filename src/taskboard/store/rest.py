# src/taskboard/store/rest.py

from __future__ import annotations

"""
Async client for a PostgREST-compatible tabular store.

Only the subset the app needs:
- select with optional related-row expansion and exact count
- eq / ilike / gte / lte predicates
- order, range (offset/limit), single
- insert / update / delete returning the affected rows

Errors are raised as StoreError; the pipeline decides where they are published.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..errors import StoreError

logger = logging.getLogger(__name__)

_CONTENT_RANGE_RE = re.compile(r"^\s*(?:\d+-\d+|\*)/(\d+|\*)\s*$")


@dataclass(slots=True)
class StoreResponse:
    data: list[dict[str, Any]]
    count: int | None = None

    @property
    def first(self) -> dict[str, Any] | None:
        return self.data[0] if self.data else None


def parse_content_range(raw: str | None) -> int | None:
    """
    Parse the total from a Content-Range header.

    "0-9/25" -> 25, "*/0" -> 0, "0-9/*" -> None (count unknown).
    """
    if not raw:
        return None
    m = _CONTENT_RANGE_RE.match(raw)
    if not m or m.group(1) == "*":
        return None
    return int(m.group(1))


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


@dataclass(slots=True)
class TableQuery:
    """One request against one table. Builder methods return self."""

    _store: RestStore
    table: str
    method: str = "GET"
    params: list[tuple[str, str]] = field(default_factory=list)
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    expect_single: bool = False

    # ---- statements ----

    def select(self, columns: str = "*", *, count: str | None = None) -> TableQuery:
        self.method = "GET"
        self.params.append(("select", _compact_columns(columns)))
        if count is not None:
            self.headers["Prefer"] = f"count={count}"
        return self

    def insert(self, row: dict[str, Any]) -> TableQuery:
        self.method = "POST"
        self.body = row
        self.headers["Prefer"] = "return=representation"
        return self

    def update(self, patch: dict[str, Any]) -> TableQuery:
        self.method = "PATCH"
        self.body = patch
        self.headers["Prefer"] = "return=representation"
        return self

    def delete(self) -> TableQuery:
        self.method = "DELETE"
        return self

    # ---- predicates ----

    def eq(self, column: str, value: Any) -> TableQuery:
        self.params.append((column, f"eq.{_format_value(value)}"))
        return self

    def ilike(self, column: str, pattern: str) -> TableQuery:
        self.params.append((column, f"ilike.{pattern}"))
        return self

    def gte(self, column: str, value: Any) -> TableQuery:
        self.params.append((column, f"gte.{_format_value(value)}"))
        return self

    def lte(self, column: str, value: Any) -> TableQuery:
        self.params.append((column, f"lte.{_format_value(value)}"))
        return self

    # ---- shaping ----

    def order(self, column: str, *, ascending: bool = True) -> TableQuery:
        self.params.append(("order", f"{column}.{'asc' if ascending else 'desc'}"))
        return self

    def range(self, start: int, end: int) -> TableQuery:
        """Inclusive row window, e.g. range(0, 9) for the first ten rows."""
        self.params.append(("offset", str(int(start))))
        self.params.append(("limit", str(max(0, int(end) - int(start) + 1))))
        return self

    def single(self) -> TableQuery:
        self.expect_single = True
        return self

    async def execute(self) -> StoreResponse:
        return await self._store.send(self)


def _compact_columns(columns: str) -> str:
    # "*, tasks ( id, title )" -> "*,tasks(id,title)"
    return re.sub(r"\s+", "", columns)


class RestStore:
    """
    httpx-based store client.

    The AsyncClient can be injected (tests pass one with a MockTransport);
    otherwise one is created and owned by this object.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        rest_path: str = "/rest/v1",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/") + "/" + rest_path.strip("/")
        self._headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        logger.info("RestStore ready base=%s", self._base)

    def table(self, name: str) -> TableQuery:
        return TableQuery(_store=self, table=name)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, query: TableQuery) -> StoreResponse:
        url = f"{self._base}/{query.table}"
        headers = {**self._headers, **query.headers}

        logger.debug("%s %s params=%s", query.method, query.table, query.params)
        try:
            resp = await self._client.request(
                query.method,
                url,
                params=query.params,
                headers=headers,
                json=query.body,
            )
        except httpx.HTTPError as exc:
            raise StoreError(str(exc) or exc.__class__.__name__) from exc

        if resp.status_code >= 400:
            raise _error_from_response(resp)

        data = _rows_from_response(resp)
        count = parse_content_range(resp.headers.get("Content-Range"))

        if query.expect_single and len(data) != 1:
            raise StoreError(
                "JSON object requested, multiple (or no) rows returned",
                status_code=406,
                code="PGRST116",
            )

        return StoreResponse(data=data, count=count)


def _rows_from_response(resp: httpx.Response) -> list[dict[str, Any]]:
    if not resp.content:
        return []
    try:
        payload = resp.json()
    except ValueError as exc:
        raise StoreError(f"Malformed store response ({resp.status_code})") from exc
    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        raise StoreError(f"Unexpected store payload type: {type(payload).__name__}")
    return [row for row in payload if isinstance(row, dict)]


def _error_from_response(resp: httpx.Response) -> StoreError:
    message = ""
    code = None
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = str(payload.get("message") or "")
        code = payload.get("code")
    if not message:
        message = resp.text.strip() or f"Store request failed with HTTP {resp.status_code}"
    return StoreError(message, status_code=resp.status_code, code=str(code) if code else None)
