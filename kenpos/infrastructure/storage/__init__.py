"""Storage adapters."""

from kenpos.infrastructure.storage.memory_store import InMemoryPersistenceStore
from kenpos.infrastructure.storage.sqlite import SQLitePersistenceStore, get_persistence_store

__all__ = [
    "InMemoryPersistenceStore",
    "SQLitePersistenceStore",
    "get_persistence_store",
]
