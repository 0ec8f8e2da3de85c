"""Layer-pure domain services. No infrastructure imports."""

from kenpos.core.services.cart import add_to_cart, remove_from_cart, set_quantity
from kenpos.core.services.identifiers import IdGenerator, new_id
from kenpos.core.services.loyalty import LoyaltyLedger, LoyaltyOutcome
from kenpos.core.services.pricing import (
    CartTotals,
    Discount,
    PriceBreakdown,
    cart_totals,
    discount_amount,
    price_breakdown,
    round_money,
    to_number,
)
from kenpos.core.services.receiving import ReceiptOutcome, StockDelta, apply_receipt
from kenpos.core.services.shift_reconciliation import (
    ShiftReport,
    active_shift_for,
    build_report,
    close_shift,
)

__all__ = [
    "add_to_cart",
    "remove_from_cart",
    "set_quantity",
    "IdGenerator",
    "new_id",
    "LoyaltyLedger",
    "LoyaltyOutcome",
    "CartTotals",
    "Discount",
    "PriceBreakdown",
    "cart_totals",
    "discount_amount",
    "price_breakdown",
    "round_money",
    "to_number",
    "ReceiptOutcome",
    "StockDelta",
    "apply_receipt",
    "ShiftReport",
    "active_shift_for",
    "build_report",
    "close_shift",
]
