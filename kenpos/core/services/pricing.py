"""
Pricing engine.

Pure functions for VAT breakdown, discounts and cart totals. No rounding
happens inside the calculations; values are rounded half-up to cents only
when they are persisted or displayed (see CartTotals.rounded).
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal

from kenpos.core.entities.product import CartItem, PricingType

_CENT = Decimal("0.01")
# Weighed and measured goods (kg, ltr) are counted to the gram or millilitre
_QUANTITY_STEP = Decimal("0.001")

DiscountType = Literal["percentage", "fixed"]


def to_number(value: Any) -> float:
    """Coerce to float; anything unusable counts as zero."""
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def round_money(value: Any) -> float:
    """Round half-up to two decimals."""
    return float(Decimal(str(to_number(value))).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_quantity(value: Any) -> float:
    return float(Decimal(str(to_number(value))).quantize(_QUANTITY_STEP, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: float
    vat_amount: float

    @property
    def gross(self) -> float:
        return self.base_price + self.vat_amount


def price_breakdown(
    amount: Any, pricing_type: PricingType | str, vat_rate: Any
) -> PriceBreakdown:
    """Split an amount into base price and VAT.

    Args:
        amount: Price as entered
        pricing_type: Whether ``amount`` already includes VAT
        vat_rate: VAT as a fraction (0.16 for 16%)
    """
    amount = to_number(amount)
    rate = max(to_number(vat_rate), 0.0)
    if PricingType(pricing_type) == PricingType.INCLUSIVE:
        base = amount / (1 + rate)
        return PriceBreakdown(base_price=base, vat_amount=amount - base)
    return PriceBreakdown(base_price=amount, vat_amount=amount * rate)


@dataclass(frozen=True)
class Discount:
    type: DiscountType = "percentage"
    value: float = 0.0


def discount_amount(subtotal: Any, discount: Discount | None, max_value: Any) -> float:
    """Discount in currency, clamped to the configured maximum and the subtotal."""
    subtotal = max(to_number(subtotal), 0.0)
    if discount is None:
        return 0.0
    value = min(max(to_number(discount.value), 0.0), max(to_number(max_value), 0.0))
    if discount.type == "percentage":
        amount = subtotal * value / 100
    else:
        amount = value
    return min(amount, subtotal)


@dataclass(frozen=True)
class CartTotals:
    subtotal: float
    discount_amount: float
    taxable_amount: float
    tax: float
    total: float

    def rounded(self) -> "CartTotals":
        """Cent values whose components add up exactly to the rounded total.

        VAT absorbs the rounding residue so a VAT-inclusive sticker total is
        preserved.
        """
        subtotal = round_money(self.subtotal)
        discount = round_money(self.discount_amount)
        total = round_money(self.total)
        taxable = round_money(subtotal - discount)
        return CartTotals(
            subtotal=subtotal,
            discount_amount=discount,
            taxable_amount=taxable,
            tax=round_money(total - taxable),
            total=total,
        )


def cart_totals(
    items: Iterable[CartItem],
    discount: Discount | None = None,
    vat_rate: Any = 0.0,
    max_discount: Any = 0.0,
) -> CartTotals:
    """Compute cart totals.

    Each line is reduced to its taxable base at its own pricing type, the
    discount is applied before tax and VAT is charged on the remainder.
    """
    rate = max(to_number(vat_rate), 0.0)
    subtotal = sum(
        price_breakdown(
            to_number(item.price) * to_number(item.quantity), item.pricing_type, rate
        ).base_price
        for item in items
    )
    discount_value = discount_amount(subtotal, discount, max_discount)
    taxable = subtotal - discount_value
    tax = taxable * rate
    return CartTotals(
        subtotal=subtotal,
        discount_amount=discount_value,
        taxable_amount=taxable,
        tax=tax,
        total=taxable + tax,
    )
