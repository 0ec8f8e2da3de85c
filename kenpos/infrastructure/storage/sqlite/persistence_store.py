"""SQLite implementation of record persistence."""

import json
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Any

import aiosqlite

from kenpos.config import get_logger
from kenpos.core.exceptions import DatabaseError
from kenpos.core.interfaces.storage import Collection, IPersistenceStore, collection_name
from kenpos.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool

logger = get_logger(__name__)

_UPSERT = """
    INSERT INTO records (collection, id, payload, seq)
    VALUES (
        ?, ?, ?,
        (SELECT COALESCE(MAX(seq), 0) + 1 FROM records WHERE collection = ?)
    )
    ON CONFLICT (collection, id) DO UPDATE SET
        payload = excluded.payload,
        updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
"""


@contextmanager
def _database_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except aiosqlite.Error as e:
        logger.error("database_operation_failed", operation=operation, error=str(e))
        raise DatabaseError(operation, str(e)) from e


def _record_id(record: dict[str, Any]) -> str:
    record_id = record.get("id")
    if not isinstance(record_id, str) or not record_id:
        raise ValueError("record must carry a non-empty string 'id'")
    return record_id


async def _fetch_one(
    conn: aiosqlite.Connection, collection: str, record_id: str
) -> dict[str, Any] | None:
    cursor = await conn.execute(
        "SELECT payload FROM records WHERE collection = ? AND id = ?",
        (collection, record_id),
    )
    row = await cursor.fetchone()
    return json.loads(row["payload"]) if row else None


async def _fetch_all(conn: aiosqlite.Connection, collection: str) -> list[dict[str, Any]]:
    cursor = await conn.execute(
        "SELECT payload FROM records WHERE collection = ? ORDER BY seq",
        (collection,),
    )
    rows = await cursor.fetchall()
    return [json.loads(row["payload"]) for row in rows]


async def _upsert(conn: aiosqlite.Connection, collection: str, record: dict[str, Any]) -> None:
    await conn.execute(
        _UPSERT, (collection, _record_id(record), json.dumps(record), collection)
    )


async def _remove(conn: aiosqlite.Connection, collection: str, record_id: str) -> bool:
    cursor = await conn.execute(
        "DELETE FROM records WHERE collection = ? AND id = ?",
        (collection, record_id),
    )
    return cursor.rowcount > 0


class SQLiteTransactionScope(IPersistenceStore):
    """Store view bound to one connection inside an open transaction."""

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get(self, collection: Collection | str, record_id: str) -> dict[str, Any] | None:
        return await _fetch_one(self._conn, collection_name(collection), record_id)

    async def get_all(self, collection: Collection | str) -> list[dict[str, Any]]:
        return await _fetch_all(self._conn, collection_name(collection))

    async def put(self, collection: Collection | str, record: dict[str, Any]) -> None:
        await _upsert(self._conn, collection_name(collection), record)

    async def delete(self, collection: Collection | str, record_id: str) -> bool:
        return await _remove(self._conn, collection_name(collection), record_id)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IPersistenceStore]:
        # Already inside the outer transaction
        yield self


class SQLitePersistenceStore(IPersistenceStore):
    """SQLite implementation of record persistence.

    Records live in a single ``records`` table keyed by (collection, id)
    with the entity serialized as JSON.
    """

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            self._pool = await get_pool()
        return self._pool

    async def get(self, collection: Collection | str, record_id: str) -> dict[str, Any] | None:
        pool = await self._get_pool()
        with _database_errors("get"):
            async with pool.acquire() as conn:
                return await _fetch_one(conn, collection_name(collection), record_id)

    async def get_all(self, collection: Collection | str) -> list[dict[str, Any]]:
        pool = await self._get_pool()
        with _database_errors("get_all"):
            async with pool.acquire() as conn:
                return await _fetch_all(conn, collection_name(collection))

    async def put(self, collection: Collection | str, record: dict[str, Any]) -> None:
        pool = await self._get_pool()
        with _database_errors("put"):
            async with pool.transaction() as conn:
                await _upsert(conn, collection_name(collection), record)

    async def delete(self, collection: Collection | str, record_id: str) -> bool:
        pool = await self._get_pool()
        with _database_errors("delete"):
            async with pool.transaction() as conn:
                deleted = await _remove(conn, collection_name(collection), record_id)
        if deleted:
            logger.debug("record_deleted", collection=collection_name(collection), id=record_id)
        return deleted

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IPersistenceStore]:
        """Serializable unit of work (BEGIN IMMEDIATE)."""
        pool = await self._get_pool()
        with _database_errors("transaction"):
            async with pool.transaction(immediate=True) as conn:
                yield SQLiteTransactionScope(conn)
