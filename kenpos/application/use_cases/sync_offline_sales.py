"""
Sync Offline Sales Use Case.

Drains the offline queue to the remote endpoint.
"""

import asyncio
from dataclasses import dataclass, field

from kenpos.application.audit import record_audit
from kenpos.application.dto.responses import SyncResponse
from kenpos.application.repository import Repositories
from kenpos.config import get_logger
from kenpos.core.entities import AuditAction, Sale
from kenpos.core.interfaces.storage import Collection, IPersistenceStore
from kenpos.core.interfaces.sync import IRemoteSyncEndpoint

logger = get_logger(__name__)

SYSTEM_USER = "system"


@dataclass
class SyncReport:
    """Outcome of one pass over the offline queue."""

    success_count: int = 0
    failed_count: int = 0
    synced_records: list[Sale] = field(default_factory=list)
    cancelled: bool = False


class SyncOfflineSalesUseCase:
    """Push queued sales to the remote and move accepted ones into sales.

    Each accepted record leaves the queue and lands in the sales collection
    in one transaction, so a record is either fully moved or still queued.
    Rejections and endpoint faults are counted and never raised.
    """

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        endpoint: IRemoteSyncEndpoint | None = None,
    ):
        self._store = store
        self._endpoint = endpoint

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    def _get_endpoint(self) -> IRemoteSyncEndpoint:
        if self._endpoint is None:
            from kenpos.infrastructure.sync import get_sync_endpoint

            self._endpoint = get_sync_endpoint()
        return self._endpoint

    async def pending_count(self) -> int:
        store = await self._get_store()
        return len(await store.get_all(Collection.ORDER_QUEUE))

    async def execute(self, cancel_event: asyncio.Event | None = None) -> SyncReport:
        """Execute one sync pass.

        Args:
            cancel_event: When set, the pass stops before the next record and
                leaves the rest queued.
        """
        store = await self._get_store()
        endpoint = self._get_endpoint()
        queued = await Repositories.bind(store).order_queue.list()
        logger.info("sync_offline_sales_started", queued=len(queued))

        report = SyncReport()
        seen: set[str] = set()
        for sale in queued:
            if cancel_event is not None and cancel_event.is_set():
                report.cancelled = True
                logger.info("sync_offline_sales_cancelled", remaining=len(queued) - len(seen))
                break
            if sale.id in seen:
                continue
            seen.add(sale.id)

            try:
                accepted = await endpoint.push_sale(sale)
            except Exception as e:
                # Endpoint faults keep the record queued for the next pass
                logger.warning("sync_sale_failed", sale_id=sale.id, error=str(e))
                accepted = False

            if not accepted:
                report.failed_count += 1
                continue

            synced = sale.model_copy(update={"synced": True})
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                await repos.sales.save(synced)
                await repos.order_queue.remove(sale.id)
            report.success_count += 1
            report.synced_records.append(synced)

        if report.success_count:
            await record_audit(
                Repositories.bind(store),
                SYSTEM_USER,
                AuditAction.SYNC_SALES,
                {
                    "synced": report.success_count,
                    "failed": report.failed_count,
                    "sale_ids": [s.id for s in report.synced_records],
                },
            )

        logger.info(
            "sync_offline_sales_complete",
            success=report.success_count,
            failed=report.failed_count,
            cancelled=report.cancelled,
        )
        return report

    def to_response(self, report: SyncReport) -> SyncResponse:
        return SyncResponse(
            success_count=report.success_count,
            failed_count=report.failed_count,
            synced_ids=[s.id for s in report.synced_records],
            cancelled=report.cancelled,
        )
