"""Core domain entities."""

from kenpos.core.entities.audit import AuditAction, AuditLog
from kenpos.core.entities.customer import Customer
from kenpos.core.entities.product import (
    FRACTIONAL_UNITS,
    Cart,
    CartItem,
    PricingType,
    Product,
    ProductType,
    allows_fraction,
)
from kenpos.core.entities.purchase import (
    POStatus,
    PurchaseOrder,
    PurchaseOrderItem,
    ReceivedItem,
)
from kenpos.core.entities.quotation import Quotation, QuotationItem, QuotationStatus
from kenpos.core.entities.sale import MONEY_EPSILON, Payment, PaymentMethod, Sale
from kenpos.core.entities.shift import Shift, ShiftStatus
from kenpos.core.entities.supplier import (
    DEFAULT_CREDIT_DAYS,
    InvoiceStatus,
    Supplier,
    SupplierInvoice,
    SupplierPayment,
    SupplierPaymentMethod,
)

__all__ = [
    # Audit
    "AuditAction",
    "AuditLog",
    # Customer
    "Customer",
    # Product
    "FRACTIONAL_UNITS",
    "Cart",
    "CartItem",
    "PricingType",
    "Product",
    "ProductType",
    "allows_fraction",
    # Purchase
    "POStatus",
    "PurchaseOrder",
    "PurchaseOrderItem",
    "ReceivedItem",
    # Quotation
    "Quotation",
    "QuotationItem",
    "QuotationStatus",
    # Sale
    "MONEY_EPSILON",
    "Payment",
    "PaymentMethod",
    "Sale",
    # Shift
    "Shift",
    "ShiftStatus",
    # Supplier
    "DEFAULT_CREDIT_DAYS",
    "InvoiceStatus",
    "Supplier",
    "SupplierInvoice",
    "SupplierPayment",
    "SupplierPaymentMethod",
]
