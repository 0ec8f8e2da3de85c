"""In-memory implementation of record persistence."""

import copy
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from kenpos.config import get_logger
from kenpos.core.interfaces.storage import Collection, IPersistenceStore, collection_name

logger = get_logger(__name__)

_MISSING = object()


class InMemoryPersistenceStore(IPersistenceStore):
    """Dict-backed store for embedded use and tests.

    Records are deep-copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self, initial: dict[str, list[dict[str, Any]]] | None = None):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        for name, records in (initial or {}).items():
            for record in records:
                self._write(name, record)

    def _write(self, collection: str, record: dict[str, Any]) -> None:
        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise ValueError("record must carry a non-empty string 'id'")
        self._data.setdefault(collection, {})[record_id] = copy.deepcopy(record)

    async def get(self, collection: Collection | str, record_id: str) -> dict[str, Any] | None:
        record = self._data.get(collection_name(collection), {}).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    async def get_all(self, collection: Collection | str) -> list[dict[str, Any]]:
        return [copy.deepcopy(r) for r in self._data.get(collection_name(collection), {}).values()]

    async def put(self, collection: Collection | str, record: dict[str, Any]) -> None:
        self._write(collection_name(collection), record)

    async def delete(self, collection: Collection | str, record_id: str) -> bool:
        return self._data.get(collection_name(collection), {}).pop(record_id, None) is not None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IPersistenceStore]:
        scope = _UndoScope(self)
        try:
            yield scope
        except BaseException:
            scope.rollback()
            raise


class _UndoScope(IPersistenceStore):
    """Writes straight through and keeps the prior value of every touched key."""

    def __init__(self, store: InMemoryPersistenceStore):
        self._store = store
        self._undo: dict[tuple[str, str], Any] = {}

    def _remember(self, collection: str, record_id: str) -> None:
        key = (collection, record_id)
        if key not in self._undo:
            current = self._store._data.get(collection, {}).get(record_id, _MISSING)
            self._undo[key] = current if current is _MISSING else copy.deepcopy(current)

    def rollback(self) -> None:
        for (collection, record_id), previous in self._undo.items():
            records = self._store._data.setdefault(collection, {})
            if previous is _MISSING:
                records.pop(record_id, None)
            else:
                records[record_id] = previous
        logger.debug("memory_transaction_rolled_back", keys=len(self._undo))
        self._undo.clear()

    async def get(self, collection: Collection | str, record_id: str) -> dict[str, Any] | None:
        return await self._store.get(collection, record_id)

    async def get_all(self, collection: Collection | str) -> list[dict[str, Any]]:
        return await self._store.get_all(collection)

    async def put(self, collection: Collection | str, record: dict[str, Any]) -> None:
        name = collection_name(collection)
        self._remember(name, str(record.get("id")))
        await self._store.put(name, record)

    async def delete(self, collection: Collection | str, record_id: str) -> bool:
        name = collection_name(collection)
        self._remember(name, record_id)
        return await self._store.delete(name, record_id)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[IPersistenceStore]:
        yield self
