"""End Shift Use Case with cash reconciliation."""

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import EndShiftRequest
from kenpos.application.locks import AggregateLocks, get_aggregate_locks, shift_key
from kenpos.application.repository import Repositories
from kenpos.config import get_logger
from kenpos.core.entities import AuditAction, Sale, Shift
from kenpos.core.exceptions import NoActiveShiftError
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.shift_reconciliation import active_shift_for, close_shift

logger = get_logger(__name__)


async def load_shift_sales(repos: Repositories, shift: Shift) -> list[Sale]:
    """Sales of a shift, whether synced or still in the offline queue."""
    sales = []
    for sale_id in shift.sales_ids:
        sale = await repos.sales.get(sale_id) or await repos.order_queue.get(sale_id)
        if sale is None:
            logger.warning("shift_sale_missing", shift_id=shift.id, sale_id=sale_id)
            continue
        sales.append(sale)
    return sales


class EndShiftUseCase:
    """Close a user's active shift and record the cash variance."""

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        locks: AggregateLocks | None = None,
    ):
        self._store = store
        self._locks = locks or get_aggregate_locks()

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def execute(self, request: EndShiftRequest) -> Shift:
        """Execute end shift use case."""
        logger.info(
            "end_shift_started",
            user_id=request.user_id,
            actual_cash=request.actual_cash_in_drawer,
        )

        store = await self._get_store()
        async with self._locks.hold(shift_key(request.user_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                shift = active_shift_for(await repos.shifts.list(), request.user_id)
                if shift is None:
                    raise NoActiveShiftError(request.user_id)

                sales = await load_shift_sales(repos, shift)
                closed = close_shift(shift, sales, request.actual_cash_in_drawer)
                await repos.shifts.save(closed)
                await record_audit(
                    repos,
                    request.user_id,
                    AuditAction.SHIFT_END,
                    {
                        "shift_id": closed.id,
                        "expected": closed.expected_cash_in_drawer,
                        "actual": closed.actual_cash_in_drawer,
                        "variance": closed.cash_variance,
                    },
                )

        logger.info(
            "end_shift_complete",
            shift_id=closed.id,
            sales=len(sales),
            total_sales=closed.total_sales,
            variance=closed.cash_variance,
        )
        return closed
