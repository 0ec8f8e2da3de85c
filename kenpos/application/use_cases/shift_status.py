"""Shift queries: active shift lookup and Z-report."""

from dataclasses import asdict

from kenpos.application.dto.responses import ShiftReportResponse, ShiftStatusResponse
from kenpos.application.repository import Repositories
from kenpos.application.use_cases.end_shift import load_shift_sales
from kenpos.config import get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import Shift
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.shift_reconciliation import (
    ShiftReport,
    active_shift_for,
    build_report,
)


class ShiftStatusUseCase:
    """Read-only shift queries.

    ``has_active_shift`` backs the logout policy: a cashier with an open
    shift must end it first.
    """

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        settings: Settings | None = None,
    ):
        self._store = store
        self._settings = settings

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def active_shift(self, user_id: str) -> Shift | None:
        repos = Repositories.bind(await self._get_store())
        return active_shift_for(await repos.shifts.list(), user_id)

    async def has_active_shift(self, user_id: str) -> bool:
        return await self.active_shift(user_id) is not None

    async def status(self, user_id: str) -> ShiftStatusResponse:
        shift = await self.active_shift(user_id)
        return ShiftStatusResponse(
            user_id=user_id,
            has_active_shift=shift is not None,
            shift_id=shift.id if shift else None,
        )

    async def report(self, shift_id: str) -> ShiftReport:
        """Z-report for a shift (running figures while it is open)."""
        settings = self._settings or get_settings()
        repos = Repositories.bind(await self._get_store())
        shift = await repos.shifts.require(shift_id)
        sales = await load_shift_sales(repos, shift)
        return build_report(shift, sales, settings.tax.effective_rate)

    def to_response(self, report: ShiftReport) -> ShiftReportResponse:
        return ShiftReportResponse(**asdict(report))
