"""Start Shift Use Case."""

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import StartShiftRequest
from kenpos.application.locks import AggregateLocks, get_aggregate_locks, shift_key
from kenpos.application.repository import Repositories
from kenpos.config import get_logger
from kenpos.core.entities import AuditAction, Shift
from kenpos.core.exceptions import ShiftAlreadyActiveError, ValidationError
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.identifiers import new_id
from kenpos.core.services.pricing import round_money
from kenpos.core.services.shift_reconciliation import active_shift_for

logger = get_logger(__name__)


class StartShiftUseCase:
    """Open a shift for a user. A user holds at most one active shift."""

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

    async def execute(self, request: StartShiftRequest) -> Shift:
        """Execute start shift use case."""
        logger.info(
            "start_shift_started",
            user_id=request.user_id,
            starting_float=request.starting_float,
        )
        if request.starting_float < 0:
            raise ValidationError(
                "starting_float", "cannot be negative", request.starting_float
            )

        store = await self._get_store()
        async with self._locks.hold(shift_key(request.user_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                existing = active_shift_for(await repos.shifts.list(), request.user_id)
                if existing is not None:
                    raise ShiftAlreadyActiveError(request.user_id, existing.id)

                shift = Shift(
                    id=new_id("shift_"),
                    user_id=request.user_id,
                    user_name=request.user_name,
                    starting_float=round_money(request.starting_float),
                )
                await repos.shifts.save(shift)
                await record_audit(
                    repos,
                    request.user_id,
                    AuditAction.SHIFT_START,
                    {"shift_id": shift.id, "starting_float": shift.starting_float},
                )

        logger.info("start_shift_complete", shift_id=shift.id, user_id=shift.user_id)
        return shift
