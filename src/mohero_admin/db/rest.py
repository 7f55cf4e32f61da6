"""REST backend for the hosted PostgREST-style table API."""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import httpx

from ..errors import BackendError
from ..logger import get_logger
from .backend import Row, TableBackend, check_identifier, new_id

log = get_logger("backend.rest")


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote(value: Any) -> str:
    text = _format_value(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_filter_params(filters: dict | None) -> list[tuple[str, str]]:
    """Translate equality/IN filters into PostgREST query parameters."""
    params = []
    for column, value in (filters or {}).items():
        check_identifier(column)
        if isinstance(value, (list, tuple, set)):
            values = ",".join(_quote(v) for v in value)
            params.append((column, f"in.({values})"))
        elif value is None:
            params.append((column, "is.null"))
        else:
            params.append((column, f"eq.{_format_value(value)}"))
    return params


class RestBackend(TableBackend):
    """Backend talking to the hosted table API over HTTPS.

    Each call maps to a single HTTP request, which the server runs as one
    statement. There are no client-side transactions; ``atomic()`` only
    keeps other callers of this client from interleaving with the block.
    """

    name = "rest"

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ValueError("Backend URL is required")
        if not key:
            raise ValueError("Backend access key is required")

        self.base_url = url.rstrip("/") + "/rest/v1"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )
        self._lock = asyncio.Lock()
        self._tx_owner: asyncio.Task | None = None

    async def close(self) -> None:
        await self._client.aclose()

    @asynccontextmanager
    async def atomic(self):
        if self._tx_owner is not None and self._tx_owner is asyncio.current_task():
            yield self
            return
        async with self._lock:
            self._tx_owner = asyncio.current_task()
            try:
                yield self
            finally:
                self._tx_owner = None

    async def _request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        check_identifier(table)
        headers = {"Prefer": prefer} if prefer else {}
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = e.response.text
            try:
                message = e.response.json().get("message", message)
            except ValueError:
                pass
            log.error(f"{method} {table} failed with {e.response.status_code}: {message}")
            raise BackendError(message, table=table) from e
        except httpx.RequestError as e:
            log.error(f"{method} {table} failed: {e}")
            raise BackendError(f"Could not reach backend: {e}", table=table) from e
        return response

    async def select(
        self,
        table: str,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        params = [("select", "*")] + build_filter_params(filters)
        if order_by:
            check_identifier(order_by)
            params.append(("order", f"{order_by}.{'desc' if descending else 'asc'}"))
        if limit is not None:
            params.append(("limit", str(int(limit))))
        response = await self._request("GET", table, params=params)
        return response.json()

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        if not rows:
            return []
        payload = [{"id": new_id(), **row} for row in rows]
        response = await self._request(
            "POST", table, json=payload, prefer="return=representation"
        )
        return response.json()

    async def update(self, table: str, values: Row, filters: dict) -> list[Row]:
        if not filters:
            raise ValueError("Refusing to update every row: filters are required")
        if not values:
            return await self.select(table, filters)
        response = await self._request(
            "PATCH",
            table,
            params=build_filter_params(filters),
            json=values,
            prefer="return=representation",
        )
        return response.json()

    async def upsert(self, table: str, rows: list[Row]) -> list[Row]:
        if not rows:
            return []
        if any(not row.get("id") for row in rows):
            raise ValueError("Upserted rows must carry an id")
        response = await self._request(
            "POST",
            table,
            params=[("on_conflict", "id")],
            json=rows,
            prefer="resolution=merge-duplicates,return=representation",
        )
        return response.json()

    async def delete(self, table: str, filters: dict) -> int:
        if not filters:
            raise ValueError("Refusing to delete every row: filters are required")
        response = await self._request(
            "DELETE",
            table,
            params=build_filter_params(filters),
            prefer="return=representation",
        )
        return len(response.json())

    async def count(self, table: str, filters: dict | None = None) -> int:
        params = [("select", "id")] + build_filter_params(filters) + [("limit", "1")]
        response = await self._request("GET", table, params=params, prefer="count=exact")
        total = response.headers.get("content-range", "").rpartition("/")[2]
        if total.isdigit():
            return int(total)
        return len(response.json())
