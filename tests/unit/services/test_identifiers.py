"""Tests for identifier generation."""

from kenpos.core.services.identifiers import (
    IdGenerator,
    new_id,
    po_number,
    supplier_invoice_number,
)


class TestIdGenerator:
    def test_monotonic_within_same_millisecond(self):
        generator = IdGenerator(clock=lambda: 1000.0)
        assert generator.next_suffix() == 1_000_000
        assert generator.next_suffix() == 1_000_001
        assert generator.new_id("shift_") == "shift_1000002"

    def test_global_ids_unique(self):
        ids = {new_id("x_") for _ in range(500)}
        assert len(ids) == 500


class TestNumbers:
    def test_po_number_uses_last_six_digits(self):
        assert po_number("PO-", 1_700_000_123_456) == "PO-123456"

    def test_supplier_invoice_number(self):
        assert supplier_invoice_number("PO-123456", 1_700_000_123_456) == "INV-PO-123456-23456"
