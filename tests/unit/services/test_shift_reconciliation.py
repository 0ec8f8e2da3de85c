"""Tests for shift reconciliation."""

import pytest

from kenpos.core.entities import Payment, PaymentMethod, Sale, Shift, ShiftStatus
from kenpos.core.services.shift_reconciliation import (
    active_shift_for,
    build_report,
    close_shift,
    gross_profit,
    payment_breakdown,
)
from tests.factories import make_item


def _sale(sale_id: str, payments: list[Payment], change: float = 0.0, **overrides) -> Sale:
    data = {
        "id": sale_id,
        "items": [make_item(quantity=1)],
        "subtotal": 862.07,
        "tax": 137.93,
        "total": 1000.0,
        "payments": payments,
        "change": change,
        "customer_id": "cust001",
        "cashier_id": "cashier_1",
        "shift_id": "shift_1",
    }
    data.update(overrides)
    return Sale(**data)


@pytest.fixture
def shift() -> Shift:
    return Shift(id="shift_1", user_id="cashier_1", starting_float=5000)


@pytest.fixture
def sales() -> list[Sale]:
    return [
        _sale("s1", [Payment(method=PaymentMethod.CASH, amount=1200)], change=200),
        _sale("s2", [Payment(method=PaymentMethod.MPESA, amount=1000, transaction_code="QX1")]),
    ]


class TestActiveShift:
    def test_finds_only_active(self, shift):
        closed = shift.model_copy(update={"id": "old", "status": ShiftStatus.CLOSED})
        assert active_shift_for([closed, shift], "cashier_1").id == "shift_1"
        assert active_shift_for([closed], "cashier_1") is None


class TestCloseShift:
    def test_expected_cash_and_variance(self, shift, sales):
        closed = close_shift(shift, sales, actual_cash_in_drawer=5990)
        assert closed.status == ShiftStatus.CLOSED
        assert closed.end_time is not None
        assert closed.expected_cash_in_drawer == 6000
        assert closed.cash_variance == -10
        assert closed.total_sales == 2000
        assert closed.total_change == 200
        assert closed.payment_breakdown == {"Cash": 1200, "M-Pesa": 1000}

    def test_original_shift_untouched(self, shift, sales):
        close_shift(shift, sales, 6000)
        assert shift.is_active

    def test_no_sales(self, shift):
        closed = close_shift(shift, [], 5000)
        assert closed.expected_cash_in_drawer == 5000
        assert closed.cash_variance == 0


class TestReport:
    def test_breakdown(self, sales):
        assert payment_breakdown(sales) == {"Cash": 1200, "M-Pesa": 1000}

    def test_gross_profit_on_vat_exclusive_price(self, sales):
        # (862.07 - 600) per sale
        assert gross_profit(sales, 0.16) == 524.14

    def test_running_report_for_open_shift(self, shift, sales):
        report = build_report(shift, sales, 0.16)
        assert report.sales_count == 2
        assert report.status == "active"
        assert report.expected_cash_in_drawer == 6000
        assert report.cash_variance is None
        assert report.total_tax == 275.86
