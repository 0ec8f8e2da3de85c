"""Tests for CompleteSaleUseCase."""

import asyncio

import pytest

from kenpos.application.dto.requests import CompleteSaleRequest, PaymentRequest
from kenpos.application.use_cases import CompleteSaleUseCase
from kenpos.core.entities import AuditAction, Cart, PaymentMethod, Shift
from kenpos.core.exceptions import (
    EmptyCartError,
    InsufficientPaymentError,
    InsufficientStockError,
    NoActiveShiftError,
    OverpaymentError,
    RecordNotFoundError,
    ValidationError,
)
from kenpos.core.interfaces import Collection, collection_name
from kenpos.infrastructure.storage import InMemoryPersistenceStore
from tests.factories import make_item


def _cash(amount: float) -> list[PaymentRequest]:
    return [PaymentRequest(method=PaymentMethod.CASH, amount=amount)]


@pytest.fixture
def use_case(store, online, locks):
    return CompleteSaleUseCase(store=store, connectivity=online, locks=locks)


class TestCompleteSale:
    async def test_cash_sale(self, use_case, repos, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(2000))
        )
        sale = result.sale
        assert sale.id.startswith("INV-")
        assert sale.total == 2000.0
        assert sale.subtotal == 1724.14
        assert sale.tax == 275.86
        assert sale.change == 0
        assert sale.synced is True
        assert result.queued is False

        assert (await repos.products.require("prod_1")).stock == 8
        assert sale.id in (await repos.shifts.require("shift_1")).sales_ids
        assert await repos.sales.get(sale.id) is not None
        assert await repos.carts.get("cashier_1") is None
        actions = [a.action for a in await repos.audit_logs.list()]
        assert actions == [AuditAction.SALE_COMPLETE]

    async def test_service_line_leaves_stock_alone(self, use_case, repos, cart_with_flour):
        service = await repos.products.require("prod_svc")
        cart_with_flour.items.append(make_item(service, quantity=3))
        await repos.carts.save(cart_with_flour)

        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(3000))
        )

        assert result.sale.total == 2600.0
        assert [i.product_id for i in result.sale.items] == ["prod_1", "prod_svc"]
        assert (await repos.products.require("prod_svc")).stock == 9999
        assert (await repos.products.require("prod_1")).stock == 8

    async def test_change_on_cash(self, use_case, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(2500))
        )
        assert result.sale.change == 500.0

    async def test_split_tender(self, use_case, cart_with_flour):
        payments = [
            PaymentRequest(method=PaymentMethod.MPESA, amount=1500, transaction_code="QX12"),
            PaymentRequest(method=PaymentMethod.CASH, amount=1000),
        ]
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", payments=payments)
        )
        assert result.sale.change == 500.0
        assert len(result.sale.payments) == 2

    async def test_change_cannot_exceed_cash(self, use_case, cart_with_flour):
        payments = [PaymentRequest(method=PaymentMethod.CARD, amount=2500)]
        with pytest.raises(OverpaymentError):
            await use_case.execute(CompleteSaleRequest(cashier_id="cashier_1", payments=payments))

    async def test_insufficient_payment_changes_nothing(self, use_case, repos, cart_with_flour):
        with pytest.raises(InsufficientPaymentError):
            await use_case.execute(
                CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(1500))
            )
        assert (await repos.products.require("prod_1")).stock == 10
        assert await repos.carts.get("cashier_1") is not None
        assert await repos.sales.list() == []

    async def test_points_cannot_be_tendered(self, use_case, cart_with_flour):
        payments = [PaymentRequest(method=PaymentMethod.POINTS, amount=2000)]
        with pytest.raises(ValidationError):
            await use_case.execute(CompleteSaleRequest(cashier_id="cashier_1", payments=payments))

    async def test_empty_cart(self, use_case):
        with pytest.raises(EmptyCartError):
            await use_case.execute(
                CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(10))
            )

    async def test_requires_active_shift(self, use_case, repos):
        await repos.carts.save(Cart(id="cashier_2", items=[make_item()]))
        with pytest.raises(NoActiveShiftError):
            await use_case.execute(
                CompleteSaleRequest(cashier_id="cashier_2", payments=_cash(1000))
            )

    async def test_unknown_customer(self, use_case, cart_with_flour):
        with pytest.raises(RecordNotFoundError):
            await use_case.execute(
                CompleteSaleRequest(
                    cashier_id="cashier_1", customer_id="cust_ghost", payments=_cash(2000)
                )
            )

    async def test_discount(self, use_case, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", discount_value=10, payments=_cash(1800))
        )
        assert result.sale.discount_amount == 172.41
        assert result.sale.total == 1800.0

    async def test_discount_clamped_to_maximum(self, use_case, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", discount_value=50, payments=_cash(1800))
        )
        assert result.sale.total == 1800.0


class TestLoyalty:
    async def test_redeem_and_earn(self, use_case, repos, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(
                cashier_id="cashier_1",
                customer_id="cust_jane",
                points_to_redeem=100,
                payments=_cash(1950),
            )
        )
        sale = result.sale
        assert sale.points_used == 100
        assert sale.points_value == 50.0
        assert sale.total == 1950.0
        assert sale.points_earned == 19
        assert sale.points_balance_after == 119
        assert sale.payments[-1].method == PaymentMethod.POINTS
        assert (await repos.customers.require("cust_jane")).loyalty_points == 119

    async def test_walk_in_earns_nothing(self, use_case, repos, cart_with_flour):
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", points_to_redeem=50, payments=_cash(2000))
        )
        assert result.sale.points_earned == 0
        assert result.sale.points_used == 0
        assert (await repos.customers.require("cust001")).loyalty_points == 0


class TestOffline:
    async def test_offline_sale_is_queued(self, store, offline, locks, repos, cart_with_flour):
        use_case = CompleteSaleUseCase(store=store, connectivity=offline, locks=locks)
        result = await use_case.execute(
            CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(2000))
        )
        assert result.queued is True
        assert result.sale.synced is False
        assert await repos.sales.list() == []
        assert [s.id for s in await repos.order_queue.list()] == [result.sale.id]
        assert (await repos.products.require("prod_1")).stock == 8


class FailingSalesStore(InMemoryPersistenceStore):
    """Fails on the sale write, after stock and shift were written."""

    async def put(self, collection, record):
        if collection_name(collection) == Collection.SALES.value:
            raise RuntimeError("disk full")
        await super().put(collection, record)


class TestAtomicity:
    async def test_failed_write_rolls_back_everything(self, store, online, locks):
        failing = FailingSalesStore({c.value: await store.get_all(c) for c in Collection})
        cart = Cart(id="cashier_1", items=[make_item(quantity=2)])
        await failing.put(Collection.CARTS, cart.model_dump(mode="json"))
        products_before = await failing.get_all(Collection.PRODUCTS)
        use_case = CompleteSaleUseCase(store=failing, connectivity=online, locks=locks)

        with pytest.raises(RuntimeError):
            await use_case.execute(
                CompleteSaleRequest(
                    cashier_id="cashier_1", customer_id="cust_jane", payments=_cash(2000)
                )
            )

        assert await failing.get_all(Collection.PRODUCTS) == products_before
        shift = Shift.model_validate(await failing.get(Collection.SHIFTS, "shift_1"))
        assert shift.sales_ids == []
        assert (await failing.get(Collection.CUSTOMERS, "cust_jane"))["loyalty_points"] == 200
        assert await failing.get(Collection.CARTS, "cashier_1") is not None
        assert await failing.get_all(Collection.AUDIT_LOGS) == []

    async def test_stock_shortfall_at_checkout(self, use_case, repos, cart_with_flour):
        product = await repos.products.require("prod_1")
        product.stock = 1
        await repos.products.save(product)

        with pytest.raises(InsufficientStockError):
            await use_case.execute(
                CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(2000))
            )
        assert (await repos.products.require("prod_1")).stock == 1
        assert (await repos.shifts.require("shift_1")).sales_ids == []

    async def test_concurrent_sales_never_oversell(self, use_case, repos):
        product = await repos.products.require("prod_1")
        product.stock = 3
        await repos.products.save(product)
        await repos.shifts.save(Shift(id="shift_2", user_id="cashier_2"))
        for cashier in ("cashier_1", "cashier_2"):
            await repos.carts.save(Cart(id=cashier, items=[make_item(quantity=2)]))

        results = await asyncio.gather(
            use_case.execute(CompleteSaleRequest(cashier_id="cashier_1", payments=_cash(2000))),
            use_case.execute(CompleteSaleRequest(cashier_id="cashier_2", payments=_cash(2000))),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientStockError)
        assert (await repos.products.require("prod_1")).stock == 1
