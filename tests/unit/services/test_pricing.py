"""Tests for the pricing engine."""

import pytest

from kenpos.core.entities import PricingType
from kenpos.core.services.pricing import (
    Discount,
    cart_totals,
    discount_amount,
    price_breakdown,
    round_money,
    to_number,
)
from tests.factories import make_item, make_product


class TestRounding:
    @pytest.mark.parametrize(
        "value,expected",
        [(2.675, 2.68), (1.005, 1.01), (0.125, 0.13), (10, 10.0), ("3.333", 3.33)],
    )
    def test_half_up(self, value, expected):
        assert round_money(value) == expected

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), float("inf")])
    def test_unusable_numbers_are_zero(self, value):
        assert to_number(value) == 0.0
        assert round_money(value) == 0.0


class TestPriceBreakdown:
    def test_inclusive(self):
        breakdown = price_breakdown(1000, PricingType.INCLUSIVE, 0.16)
        assert round_money(breakdown.base_price) == 862.07
        assert round_money(breakdown.vat_amount) == 137.93
        assert breakdown.gross == pytest.approx(1000)

    def test_exclusive(self):
        breakdown = price_breakdown(1000, "exclusive", 0.16)
        assert breakdown.base_price == 1000
        assert breakdown.vat_amount == pytest.approx(160)

    def test_zero_rate(self):
        breakdown = price_breakdown(500, PricingType.INCLUSIVE, 0)
        assert breakdown.base_price == 500
        assert breakdown.vat_amount == 0


class TestDiscountAmount:
    def test_percentage(self):
        assert discount_amount(1000, Discount("percentage", 5), 10) == pytest.approx(50)

    def test_percentage_clamped_to_max(self):
        assert discount_amount(1000, Discount("percentage", 20), 10) == pytest.approx(100)

    def test_fixed_clamped_to_subtotal(self):
        assert discount_amount(5, Discount("fixed", 8), 10) == 5

    def test_negative_discount_ignored(self):
        assert discount_amount(1000, Discount("percentage", -5), 10) == 0

    def test_no_discount(self):
        assert discount_amount(1000, None, 10) == 0


class TestCartTotals:
    def test_inclusive_items(self):
        totals = cart_totals([make_item(quantity=2)], vat_rate=0.16).rounded()
        assert totals.subtotal == 1724.14
        assert totals.tax == 275.86
        assert totals.total == 2000.0

    def test_discount_applied_before_tax(self):
        totals = cart_totals(
            [make_item(quantity=2)],
            discount=Discount("percentage", 10),
            vat_rate=0.16,
            max_discount=10,
        ).rounded()
        assert totals.discount_amount == 172.41
        assert totals.total == 1800.0
        assert round_money(totals.subtotal - totals.discount_amount + totals.tax) == totals.total

    def test_mixed_pricing_types(self):
        items = [
            make_item(make_product(id="a", price=100, pricing_type=PricingType.EXCLUSIVE)),
            make_item(make_product(id="b", price=116, pricing_type=PricingType.INCLUSIVE)),
        ]
        totals = cart_totals(items, vat_rate=0.16)
        assert totals.subtotal == pytest.approx(200)
        assert totals.tax == pytest.approx(32)
        assert totals.total == pytest.approx(232)

    def test_empty_cart(self):
        totals = cart_totals([], vat_rate=0.16).rounded()
        assert totals.total == 0
        assert totals.tax == 0
