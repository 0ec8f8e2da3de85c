"""
Async SQLite connection pool.

Connections are opened on demand up to ``pool_size`` and handed out one
coroutine at a time. Sale completion relies on ``transaction(immediate=True)``
so the write lock is held from the first read of a unit of work.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from kenpos.config import get_logger, get_settings
from kenpos.config.settings import StorageSettings

logger = get_logger(__name__)

_PRAGMAS = (
    # Readers keep going while a checkout holds the write lock
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)


class ConnectionPool:
    """Bounded set of aiosqlite connections to one database file."""

    def __init__(self, db_path: Path, pool_size: int = 5, busy_timeout: int = 30000):
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout

        self._idle: asyncio.LifoQueue[aiosqlite.Connection] = asyncio.LifoQueue()
        self._slots = asyncio.Semaphore(pool_size)
        self._open: list[aiosqlite.Connection] = []
        self._closed = False

    @classmethod
    def from_settings(cls, storage: StorageSettings) -> "ConnectionPool":
        return cls(storage.db_path, storage.pool_size, storage.busy_timeout)

    @property
    def size(self) -> int:
        """Connections opened so far."""
        return len(self._open)

    async def _connect(self) -> aiosqlite.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(self.db_path)
        for pragma in _PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        self._open.append(conn)
        logger.debug("sqlite_connection_opened", db_path=str(self.db_path), open=self.size)
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; waits while all ``pool_size`` are in use."""
        if self._closed:
            raise RuntimeError("connection pool is closed")
        async with self._slots:
            conn = self._idle.get_nowait() if not self._idle.empty() else await self._connect()
            try:
                yield conn
            finally:
                if conn.in_transaction:
                    # Never hand out a connection with a half-open transaction
                    await conn.rollback()
                self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self, immediate: bool = False) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection inside a transaction.

        Commits when the block exits normally and rolls back otherwise. With
        ``immediate`` the write lock is taken by ``BEGIN IMMEDIATE`` before
        the block runs.
        """
        async with self.acquire() as conn:
            if immediate:
                await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        self._closed = True
        while self._open:
            await self._open.pop().close()
        while not self._idle.empty():
            self._idle.get_nowait()
        logger.info("connection_pool_closed", db_path=str(self.db_path))


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Process-wide pool for the configured database."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_settings(get_settings().storage)
        logger.info(
            "connection_pool_created",
            db_path=str(_pool.db_path),
            pool_size=_pool.pool_size,
        )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
