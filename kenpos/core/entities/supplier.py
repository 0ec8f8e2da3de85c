"""Supplier, supplier invoice and supplier payment entities."""

import re
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

DEFAULT_CREDIT_DAYS = 30

_NET_TERMS = re.compile(r"(\d+)")


class Supplier(BaseModel):
    """A supplier of stock."""

    id: str
    name: str
    contact: str | None = None
    email: str | None = None
    credit_terms: str = "Net 30"

    @property
    def credit_days(self) -> int:
        """Days until payment is due, parsed from terms like 'Net 45'."""
        match = _NET_TERMS.search(self.credit_terms or "")
        if not match:
            return DEFAULT_CREDIT_DAYS
        return int(match.group(1))


class InvoiceStatus(str, Enum):
    UNPAID = "Unpaid"
    PARTIALLY_PAID = "Partially Paid"
    PAID = "Paid"


class SupplierInvoice(BaseModel):
    """Payable created when stock is received against a purchase order."""

    id: str
    invoice_number: str
    purchase_order_id: str
    supplier_id: str
    invoice_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    due_date: datetime
    subtotal: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = Field(ge=0)
    paid_amount: float = Field(default=0.0, ge=0)
    status: InvoiceStatus = InvoiceStatus.UNPAID

    @property
    def balance(self) -> float:
        return round(self.total_amount - self.paid_amount, 2)

    @staticmethod
    def status_for(paid_amount: float, total_amount: float) -> InvoiceStatus:
        if paid_amount <= 0:
            return InvoiceStatus.UNPAID
        if paid_amount >= total_amount:
            return InvoiceStatus.PAID
        return InvoiceStatus.PARTIALLY_PAID


class SupplierPaymentMethod(str, Enum):
    BANK_TRANSFER = "Bank Transfer"
    CASH = "Cash"
    MPESA = "M-Pesa"


class SupplierPayment(BaseModel):
    """A payment made against a supplier invoice."""

    id: str
    invoice_id: str
    supplier_id: str
    payment_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    amount: float = Field(gt=0)
    method: SupplierPaymentMethod = SupplierPaymentMethod.BANK_TRANSFER
