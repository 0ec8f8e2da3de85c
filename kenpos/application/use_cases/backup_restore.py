"""Backup and restore of every collection."""

from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from kenpos.application.audit import record_audit
from kenpos.application.repository import COLLECTION_MODELS, Repositories
from kenpos.config import get_logger
from kenpos.core.entities import AuditAction
from kenpos.core.exceptions import BackupValidationError
from kenpos.core.interfaces.storage import Collection, IPersistenceStore

logger = get_logger(__name__)

BACKUP_VERSION = 1


class BackupRestoreUseCase:
    """Export and import the full data set.

    Restore validates the whole payload before writing anything, then
    replaces the collections it contains in one transaction.
    """

    def __init__(self, store: IPersistenceStore | None = None):
        self._store = store

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def backup(self, user_id: str) -> dict[str, Any]:
        store = await self._get_store()
        await record_audit(Repositories.bind(store), user_id, AuditAction.BACKUP_DATA)

        collections = {c.value: await store.get_all(c) for c in Collection}
        logger.info(
            "backup_created",
            records=sum(len(records) for records in collections.values()),
        )
        return {
            "version": BACKUP_VERSION,
            "created_at": datetime.now(UTC).isoformat(),
            "collections": collections,
        }

    def validate(self, payload: Any) -> dict[Collection, list[dict[str, Any]]]:
        """Parse a backup payload. Raises BackupValidationError on any defect."""
        if not isinstance(payload, dict):
            raise BackupValidationError("backup must be a JSON object")

        version = payload.get("version", BACKUP_VERSION)
        if version != BACKUP_VERSION:
            raise BackupValidationError(f"unsupported backup version: {version}", "version")

        raw = payload.get("collections")
        if not isinstance(raw, dict):
            raise BackupValidationError("'collections' must be an object", "collections")

        known = {c.value: c for c in Collection}
        parsed: dict[Collection, list[dict[str, Any]]] = {}
        for name, records in raw.items():
            collection = known.get(name)
            if collection is None:
                raise BackupValidationError(f"unknown collection '{name}'", name)
            if not isinstance(records, list):
                raise BackupValidationError(f"'{name}' must be a list", name)

            model = COLLECTION_MODELS[collection]
            normalized = []
            for index, record in enumerate(records):
                location = f"{name}[{index}]"
                if not isinstance(record, dict):
                    raise BackupValidationError("record must be an object", location)
                try:
                    entity = model.model_validate(record)
                except PydanticValidationError as e:
                    raise BackupValidationError(
                        f"invalid record: {e.errors()[0].get('msg', 'invalid')}", location
                    ) from e
                normalized.append(entity.model_dump(mode="json"))
            parsed[collection] = normalized
        return parsed

    async def restore(self, payload: Any, user_id: str) -> dict[str, int]:
        """Replace the collections present in ``payload``.

        Returns:
            Number of records written per collection
        """
        parsed = self.validate(payload)
        logger.info("restore_started", collections=[c.value for c in parsed])

        store = await self._get_store()
        async with store.transaction() as tx:
            for collection, records in parsed.items():
                for existing in await tx.get_all(collection):
                    await tx.delete(collection, existing["id"])
                for record in records:
                    await tx.put(collection, record)
            await record_audit(
                Repositories.bind(tx),
                user_id,
                AuditAction.RESTORE_DATA,
                {c.value: len(records) for c, records in parsed.items()},
            )

        counts = {c.value: len(records) for c, records in parsed.items()}
        logger.info("restore_complete", counts=counts)
        return counts
