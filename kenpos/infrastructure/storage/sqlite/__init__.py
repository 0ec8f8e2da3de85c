"""SQLite storage implementations."""

from kenpos.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from kenpos.infrastructure.storage.sqlite.persistence_store import (
    SQLitePersistenceStore,
    SQLiteTransactionScope,
)

# Singleton instance
_persistence_store: SQLitePersistenceStore | None = None


async def get_persistence_store() -> SQLitePersistenceStore:
    """Get singleton persistence store instance."""
    global _persistence_store
    if _persistence_store is None:
        _persistence_store = SQLitePersistenceStore()
    return _persistence_store


def reset_persistence_store() -> None:
    """Drop the singleton (for testing)."""
    global _persistence_store
    _persistence_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Store classes
    "SQLitePersistenceStore",
    "SQLiteTransactionScope",
    # Factory functions
    "get_persistence_store",
    "reset_persistence_store",
]
