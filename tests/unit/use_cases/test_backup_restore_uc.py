"""Tests for BackupRestoreUseCase."""

import pytest

from kenpos.application.use_cases import BackupRestoreUseCase
from kenpos.core.entities import AuditAction
from kenpos.core.exceptions import BackupValidationError
from kenpos.infrastructure.storage import InMemoryPersistenceStore


@pytest.fixture
def use_case(store):
    return BackupRestoreUseCase(store=store)


class TestBackup:
    async def test_backup_contains_all_collections(self, use_case, repos):
        payload = await use_case.backup("admin")
        assert payload["version"] == 1
        assert len(payload["collections"]["products"]) == 3
        assert "order_queue" in payload["collections"]
        assert payload["collections"]["audit_logs"][0]["action"] == AuditAction.BACKUP_DATA.value

    async def test_restore_into_empty_store(self, use_case):
        payload = await use_case.backup("admin")
        target = BackupRestoreUseCase(store=InMemoryPersistenceStore())
        counts = await target.restore(payload, "admin")
        assert counts["products"] == 3
        assert counts["customers"] == 2


class TestRestore:
    async def test_replaces_given_collections_only(self, use_case, repos):
        payload = {
            "version": 1,
            "collections": {"customers": [{"id": "cust001", "name": "Walk-in Customer"}]},
        }
        counts = await use_case.restore(payload, "admin")
        assert counts == {"customers": 1}
        assert [c.id for c in await repos.customers.list()] == ["cust001"]
        assert len(await repos.products.list()) == 3

    @pytest.mark.parametrize(
        "payload",
        [
            [],
            {"version": 2, "collections": {}},
            {"version": 1},
            {"version": 1, "collections": {"unicorns": []}},
            {"version": 1, "collections": {"products": {}}},
            {"version": 1, "collections": {"products": ["not a record"]}},
            {"version": 1, "collections": {"products": [{"id": "p", "price": -1}]}},
        ],
    )
    async def test_invalid_payload_rejected(self, use_case, payload):
        with pytest.raises(BackupValidationError):
            use_case.validate(payload)

    async def test_invalid_record_writes_nothing(self, use_case, repos):
        payload = {
            "version": 1,
            "collections": {
                "customers": [],
                "products": [{"id": "p1", "name": "ok", "price": 1}, {"id": "p2"}],
            },
        }
        with pytest.raises(BackupValidationError):
            await use_case.restore(payload, "admin")
        assert len(await repos.customers.list()) == 2
        assert len(await repos.products.list()) == 3
