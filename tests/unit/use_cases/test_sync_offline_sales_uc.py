"""Tests for offline sale sync and connectivity."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from kenpos.application.connectivity import ConnectivityState
from kenpos.application.use_cases import SyncOfflineSalesUseCase
from kenpos.core.entities import AuditAction, Payment, PaymentMethod, Sale
from kenpos.core.interfaces import IRemoteSyncEndpoint
from tests.factories import make_item


def _queued_sale(sale_id: str) -> Sale:
    return Sale(
        id=sale_id,
        items=[make_item()],
        subtotal=862.07,
        tax=137.93,
        total=1000.0,
        payments=[Payment(method=PaymentMethod.CASH, amount=1000.0)],
        customer_id="cust001",
        cashier_id="cashier_1",
        shift_id="shift_1",
        synced=False,
    )


@pytest.fixture
async def queued(repos) -> list[Sale]:
    sales = [_queued_sale(f"INV-{n}") for n in (1, 2, 3)]
    for sale in sales:
        await repos.order_queue.save(sale)
    return sales


@pytest.fixture
def endpoint():
    mock = AsyncMock(spec=IRemoteSyncEndpoint)
    mock.push_sale.return_value = True
    return mock


class TestSyncOfflineSales:
    async def test_all_accepted(self, store, repos, endpoint, queued):
        use_case = SyncOfflineSalesUseCase(store=store, endpoint=endpoint)
        report = await use_case.execute()

        assert report.success_count == 3
        assert report.failed_count == 0
        assert await repos.order_queue.list() == []
        synced = await repos.sales.list()
        assert [s.id for s in synced] == ["INV-1", "INV-2", "INV-3"]
        assert all(s.synced for s in synced)
        audit = await repos.audit_logs.list()
        assert [a.action for a in audit] == [AuditAction.SYNC_SALES]

    async def test_failures_stay_queued(self, store, repos, endpoint, queued):
        endpoint.push_sale.side_effect = [True, False, RuntimeError("connection reset")]
        report = await SyncOfflineSalesUseCase(store=store, endpoint=endpoint).execute()

        assert report.success_count == 1
        assert report.failed_count == 2
        assert [s.id for s in await repos.order_queue.list()] == ["INV-2", "INV-3"]
        assert [s.id for s in await repos.sales.list()] == ["INV-1"]

    async def test_nothing_queued(self, store, endpoint):
        report = await SyncOfflineSalesUseCase(store=store, endpoint=endpoint).execute()
        assert report.success_count == 0
        endpoint.push_sale.assert_not_called()

    async def test_cancelled_before_start(self, store, repos, endpoint, queued):
        cancel = asyncio.Event()
        cancel.set()
        report = await SyncOfflineSalesUseCase(store=store, endpoint=endpoint).execute(cancel)
        assert report.cancelled is True
        endpoint.push_sale.assert_not_called()
        assert len(await repos.order_queue.list()) == 3

    async def test_cancelled_between_records(self, store, repos, endpoint, queued):
        cancel = asyncio.Event()

        async def push_then_cancel(sale):
            cancel.set()
            return True

        endpoint.push_sale.side_effect = push_then_cancel
        report = await SyncOfflineSalesUseCase(store=store, endpoint=endpoint).execute(cancel)

        assert report.cancelled is True
        assert report.success_count == 1
        assert len(await repos.order_queue.list()) == 2

    async def test_pending_count_and_response(self, store, endpoint, queued):
        use_case = SyncOfflineSalesUseCase(store=store, endpoint=endpoint)
        assert await use_case.pending_count() == 3
        response = use_case.to_response(await use_case.execute())
        assert response.synced_ids == ["INV-1", "INV-2", "INV-3"]
        assert await use_case.pending_count() == 0

    async def test_replayed_sale_recorded_once(self, store, repos, endpoint):
        sale = _queued_sale("INV-7")
        await repos.order_queue.save(sale)
        use_case = SyncOfflineSalesUseCase(store=store, endpoint=endpoint)
        await use_case.execute()

        # same sale queued again, e.g. a retry after a lost acknowledgement
        await repos.order_queue.save(sale)
        report = await use_case.execute()

        assert report.success_count == 1
        assert [s.id for s in await repos.sales.list()] == ["INV-7"]
        assert await repos.order_queue.list() == []

    async def test_sale_already_in_sales_not_duplicated(self, store, repos, endpoint):
        sale = _queued_sale("INV-8")
        await repos.sales.save(sale.model_copy(update={"synced": True}))
        await repos.order_queue.save(sale)

        await SyncOfflineSalesUseCase(store=store, endpoint=endpoint).execute()

        assert [s.id for s in await repos.sales.list()] == ["INV-8"]
        assert await repos.order_queue.list() == []


class TestConnectivity:
    async def test_reconnect_runs_sync(self):
        runner = AsyncMock(return_value="done")
        state = ConnectivityState(online=False, on_reconnect=runner)

        task = state.set_online(True)
        assert task is not None
        assert await task == "done"
        runner.assert_awaited_once()

    async def test_no_task_without_transition(self):
        state = ConnectivityState(online=True, on_reconnect=AsyncMock())
        assert state.set_online(True) is None

    async def test_going_offline_cancels_running_sync(self):
        started = asyncio.Event()
        seen: list[bool] = []

        async def runner(cancel_event: asyncio.Event):
            started.set()
            await cancel_event.wait()
            seen.append(cancel_event.is_set())

        state = ConnectivityState(online=False, on_reconnect=runner)
        task = state.set_online(True)
        await started.wait()
        state.set_online(False)
        await asyncio.wait_for(task, timeout=1)
        assert seen == [True]
        assert state.is_online is False

    async def test_manual_run_waits_for_reconnect_walk(self):
        started = asyncio.Event()
        release = asyncio.Event()
        order: list[str] = []

        async def walk(cancel_event: asyncio.Event):
            started.set()
            await release.wait()
            order.append("reconnect")

        async def manual():
            order.append("manual")
            return "report"

        state = ConnectivityState(online=False, on_reconnect=walk)
        task = state.set_online(True)
        await started.wait()

        pending = asyncio.ensure_future(state.run_exclusive(manual))
        await asyncio.sleep(0)
        assert order == []

        release.set()
        await task
        assert await pending == "report"
        assert order == ["reconnect", "manual"]
