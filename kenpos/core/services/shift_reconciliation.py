"""
Shift reconciliation.

Pure calculations for closing a shift and producing its Z-report.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from kenpos.core.entities.sale import PaymentMethod, Sale
from kenpos.core.entities.shift import Shift, ShiftStatus
from kenpos.core.services.pricing import price_breakdown, round_money, to_number


def active_shift_for(shifts: Iterable[Shift], user_id: str) -> Shift | None:
    for shift in shifts:
        if shift.user_id == user_id and shift.is_active:
            return shift
    return None


def payment_breakdown(sales: Iterable[Sale]) -> dict[str, float]:
    """Sum of payments per method across sales."""
    totals: dict[str, float] = defaultdict(float)
    for sale in sales:
        for payment in sale.payments:
            totals[payment.method.value] += payment.amount
    return {method: round_money(amount) for method, amount in totals.items()}


def close_shift(
    shift: Shift,
    sales: list[Sale],
    actual_cash_in_drawer: float,
    closed_at: datetime | None = None,
) -> Shift:
    """Return the closed shift with reconciliation figures.

    Expected cash is the starting float plus cash tendered less the change
    handed back.
    """
    breakdown = payment_breakdown(sales)
    total_change = round_money(sum(s.change for s in sales))
    expected = round_money(
        shift.starting_float + breakdown.get(PaymentMethod.CASH.value, 0.0) - total_change
    )
    actual = round_money(actual_cash_in_drawer)

    return shift.model_copy(
        update={
            "status": ShiftStatus.CLOSED,
            "end_time": closed_at or datetime.now(UTC),
            "payment_breakdown": breakdown,
            "total_sales": round_money(sum(s.total for s in sales)),
            "total_change": total_change,
            "expected_cash_in_drawer": expected,
            "actual_cash_in_drawer": actual,
            "cash_variance": round_money(actual - expected),
        }
    )


def gross_profit(sales: Iterable[Sale], vat_rate: float) -> float:
    """Profit on the VAT-exclusive selling price, less discounts given."""
    profit = 0.0
    for sale in sales:
        for item in sale.items:
            base = price_breakdown(item.price, item.pricing_type, vat_rate).base_price
            cost = to_number(item.cost_price)
            profit += (base - cost) * item.quantity
        profit -= sale.discount_amount
    return round_money(profit)


@dataclass(frozen=True)
class ShiftReport:
    """Z-report for a shift."""

    shift_id: str
    user_id: str
    status: str
    sales_count: int
    total_sales: float
    total_change: float
    total_discounts: float
    total_tax: float
    gross_profit: float
    payment_breakdown: dict[str, float] = field(default_factory=dict)
    starting_float: float = 0.0
    expected_cash_in_drawer: float | None = None
    actual_cash_in_drawer: float | None = None
    cash_variance: float | None = None


def build_report(shift: Shift, sales: list[Sale], vat_rate: float) -> ShiftReport:
    """Z-report from the shift and its sales. Open shifts report running figures."""
    breakdown = payment_breakdown(sales)
    total_change = round_money(sum(s.change for s in sales))
    expected = shift.expected_cash_in_drawer
    if expected is None:
        expected = round_money(
            shift.starting_float
            + breakdown.get(PaymentMethod.CASH.value, 0.0)
            - total_change
        )
    return ShiftReport(
        shift_id=shift.id,
        user_id=shift.user_id,
        status=shift.status.value,
        sales_count=len(sales),
        total_sales=round_money(sum(s.total for s in sales)),
        total_change=total_change,
        total_discounts=round_money(sum(s.discount_amount for s in sales)),
        total_tax=round_money(sum(s.tax for s in sales)),
        gross_profit=gross_profit(sales, vat_rate),
        payment_breakdown=breakdown,
        starting_float=shift.starting_float,
        expected_cash_in_drawer=expected,
        actual_cash_in_drawer=shift.actual_cash_in_drawer,
        cash_variance=shift.cash_variance,
    )
