"""Generic table access used by the repositories.

Every backend exposes the same small set of table operations (select,
insert, update, upsert, delete, count) so repositories never depend on the
storage engine. Filters are equality matches; a list or tuple value means
"column IN values" and ``None`` means "column IS NULL".
"""

import asyncio
import json
import re
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from ..errors import BackendError
from .schema import BOOL_COLUMNS, JSON_COLUMNS, SQLITE_SCHEMA

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")

Row = dict[str, Any]


def check_identifier(name: str) -> str:
    """Validate a table or column name before it is put in a query."""
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def new_id() -> str:
    """Generate a row id."""
    return str(uuid.uuid4())


class TableBackend(ABC):
    """Table-oriented request interface to the persistent store."""

    name = "backend"

    async def connect(self) -> "TableBackend":
        """Open the underlying connection (no-op by default)."""
        return self

    async def close(self) -> None:
        """Release the underlying connection."""

    async def __aenter__(self) -> "TableBackend":
        return await self.connect()

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        """Fetch rows matching the filters."""

    @abstractmethod
    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert rows in one batch and return them as stored."""

    @abstractmethod
    async def update(self, table: str, values: Row, filters: dict) -> list[Row]:
        """Update matching rows and return them."""

    @abstractmethod
    async def upsert(self, table: str, rows: list[Row]) -> list[Row]:
        """Insert or replace rows keyed on ``id`` in one batch."""

    @abstractmethod
    async def delete(self, table: str, filters: dict) -> int:
        """Delete matching rows and return how many were removed."""

    @abstractmethod
    async def count(self, table: str, filters: dict | None = None) -> int:
        """Count matching rows."""

    @abstractmethod
    def atomic(self):
        """Async context manager grouping several calls together."""

    async def get(self, table: str, row_id: str) -> Row | None:
        """Fetch a single row by id."""
        rows = await self.select(table, {"id": row_id}, limit=1)
        return rows[0] if rows else None


class SQLiteBackend(TableBackend):
    """Backend storing tables in a local SQLite database.

    A single long-lived connection is shared by every caller. Operations
    are serialised with a lock, and ``atomic()`` holds that lock for the
    whole transaction so concurrent tasks never see it half applied.
    """

    name = "sqlite"

    def __init__(self, db_path: Path | str = ":memory:"):
        self.db_path = str(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()
        self._tx_owner: asyncio.Task | None = None

    async def connect(self) -> "SQLiteBackend":
        if self._conn is None:
            if self.db_path != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = await aiosqlite.connect(self.db_path)
            self._conn.row_factory = aiosqlite.Row
            await self._conn.execute("PRAGMA foreign_keys = ON")
        return self

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    async def create_schema(self) -> None:
        """Create tables and indexes if they do not exist."""
        async with self._guard("schema") as conn:
            for statement in SQLITE_SCHEMA:
                await conn.execute(statement)

    def _connection(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise BackendError("SQLite backend is not connected")
        return self._conn

    def _in_transaction(self) -> bool:
        return self._tx_owner is not None and self._tx_owner is asyncio.current_task()

    @asynccontextmanager
    async def _guard(self, table: str) -> AsyncIterator[aiosqlite.Connection]:
        conn = self._connection()
        if self._in_transaction():
            try:
                yield conn
            except aiosqlite.Error as e:
                raise BackendError(str(e), table=table) from e
            return

        async with self._lock:
            try:
                yield conn
            except aiosqlite.Error as e:
                await conn.rollback()
                raise BackendError(str(e), table=table) from e
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    @asynccontextmanager
    async def atomic(self):
        if self._in_transaction():
            yield self
            return

        conn = self._connection()
        async with self._lock:
            self._tx_owner = asyncio.current_task()
            try:
                yield self
            except BaseException:
                await conn.rollback()
                raise
            else:
                try:
                    await conn.commit()
                except aiosqlite.Error as e:
                    raise BackendError(str(e)) from e
            finally:
                self._tx_owner = None

    def _encode(self, table: str, row: Row) -> Row:
        json_columns = JSON_COLUMNS.get(table, set())
        encoded = {}
        for column, value in row.items():
            check_identifier(column)
            if column in json_columns and value is not None:
                value = json.dumps(value)
            elif isinstance(value, bool):
                value = int(value)
            encoded[column] = value
        return encoded

    def _decode(self, table: str, row: aiosqlite.Row) -> Row:
        json_columns = JSON_COLUMNS.get(table, set())
        bool_columns = BOOL_COLUMNS.get(table, set())
        decoded = {}
        for column in row.keys():
            value = row[column]
            if column in json_columns and isinstance(value, str):
                value = json.loads(value)
            elif column in bool_columns and value is not None:
                value = bool(value)
            decoded[column] = value
        return decoded

    def _where(self, filters: dict | None) -> tuple[str, list]:
        if not filters:
            return "", []

        clauses = []
        params: list = []
        for column, value in filters.items():
            check_identifier(column)
            if isinstance(value, (list, tuple, set)):
                values = list(value)
                if not values:
                    clauses.append("0")
                    continue
                placeholders = ", ".join("?" for _ in values)
                clauses.append(f"{column} IN ({placeholders})")
                params.extend(values)
            elif value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(int(value) if isinstance(value, bool) else value)
        return " WHERE " + " AND ".join(clauses), params

    async def _select_by_ids(self, conn: aiosqlite.Connection, table: str, ids: list[str]) -> list[Row]:
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        cursor = await conn.execute(
            f"SELECT * FROM {table} WHERE id IN ({placeholders}) ORDER BY rowid", ids
        )
        rows = await cursor.fetchall()
        by_id = {row["id"]: self._decode(table, row) for row in rows}
        return [by_id[row_id] for row_id in ids if row_id in by_id]

    async def select(
        self,
        table: str,
        filters: dict | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        check_identifier(table)
        where, params = self._where(filters)
        sql = f"SELECT * FROM {table}{where}"
        direction = "DESC" if descending else "ASC"
        if order_by:
            check_identifier(order_by)
            sql += f" ORDER BY {order_by} {direction}, rowid {direction}"
        else:
            sql += " ORDER BY rowid"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        async with self._guard(table) as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
        return [self._decode(table, row) for row in rows]

    async def insert(self, table: str, rows: list[Row]) -> list[Row]:
        check_identifier(table)
        if not rows:
            return []

        ids = []
        async with self._guard(table) as conn:
            for row in rows:
                data = self._encode(table, {"id": new_id(), **row})
                columns = ", ".join(data)
                placeholders = ", ".join("?" for _ in data)
                await conn.execute(
                    f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
                    list(data.values()),
                )
                ids.append(data["id"])
            return await self._select_by_ids(conn, table, ids)

    async def update(self, table: str, values: Row, filters: dict) -> list[Row]:
        check_identifier(table)
        if not filters:
            raise ValueError("Refusing to update every row: filters are required")
        if not values:
            return await self.select(table, filters)

        data = self._encode(table, values)
        assignments = ", ".join(f"{column} = ?" for column in data)
        where, params = self._where(filters)

        async with self._guard(table) as conn:
            cursor = await conn.execute(f"SELECT id FROM {table}{where}", params)
            ids = [row["id"] for row in await cursor.fetchall()]
            if not ids:
                return []
            placeholders = ", ".join("?" for _ in ids)
            await conn.execute(
                f"UPDATE {table} SET {assignments} WHERE id IN ({placeholders})",
                list(data.values()) + ids,
            )
            return await self._select_by_ids(conn, table, ids)

    async def upsert(self, table: str, rows: list[Row]) -> list[Row]:
        check_identifier(table)
        if not rows:
            return []

        ids = []
        async with self._guard(table) as conn:
            for row in rows:
                if not row.get("id"):
                    raise ValueError("Upserted rows must carry an id")
                data = self._encode(table, row)
                columns = ", ".join(data)
                placeholders = ", ".join("?" for _ in data)
                updates = ", ".join(
                    f"{column} = excluded.{column}" for column in data if column != "id"
                )
                await conn.execute(
                    f"INSERT INTO {table} ({columns}) VALUES ({placeholders}) "
                    f"ON CONFLICT(id) DO UPDATE SET {updates}",
                    list(data.values()),
                )
                ids.append(data["id"])
            return await self._select_by_ids(conn, table, ids)

    async def delete(self, table: str, filters: dict) -> int:
        check_identifier(table)
        if not filters:
            raise ValueError("Refusing to delete every row: filters are required")
        where, params = self._where(filters)
        async with self._guard(table) as conn:
            cursor = await conn.execute(f"DELETE FROM {table}{where}", params)
            return cursor.rowcount

    async def count(self, table: str, filters: dict | None = None) -> int:
        check_identifier(table)
        where, params = self._where(filters)
        async with self._guard(table) as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}{where}", params)
            row = await cursor.fetchone()
        return row[0]
