"""Response bodies for the HTTP API.

Entities are returned as-is where they already form the contract; these
models cover composite results.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from kenpos.core.entities import Cart, Customer, PurchaseOrder, Sale, SupplierInvoice


class CartTotalsResponse(BaseModel):
    subtotal: float
    discount_amount: float
    tax: float
    total: float


class CartResponse(BaseModel):
    cart: Cart
    totals: CartTotalsResponse


class CompleteSaleResponse(BaseModel):
    sale: Sale
    queued: bool = Field(description="True when stored in the offline queue")
    customer: Customer | None = None


class ShiftStatusResponse(BaseModel):
    user_id: str
    has_active_shift: bool
    shift_id: str | None = None


class ShiftReportResponse(BaseModel):
    """Z-report."""

    shift_id: str
    user_id: str
    status: str
    sales_count: int
    total_sales: float
    total_change: float
    total_discounts: float
    total_tax: float
    gross_profit: float
    payment_breakdown: dict[str, float]
    starting_float: float
    expected_cash_in_drawer: float | None = None
    actual_cash_in_drawer: float | None = None
    cash_variance: float | None = None


class ReceivePurchaseOrderResponse(BaseModel):
    purchase_order: PurchaseOrder
    invoice: SupplierInvoice | None = None
    received_quantities: dict[str, float] = Field(default_factory=dict)
    ignored_product_ids: list[str] = Field(default_factory=list)


class SyncResponse(BaseModel):
    success_count: int
    failed_count: int
    synced_ids: list[str]
    cancelled: bool = False


class SyncStatusResponse(BaseModel):
    online: bool
    queued_count: int


class RestoreResponse(BaseModel):
    restored: dict[str, int] = Field(description="Records written per collection")


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    online: bool
    database: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response.

    ``error_code`` is stable (``NO_ACTIVE_SHIFT``, ``INSUFFICIENT_PAYMENT``)
    and is what the till UI branches on; ``hint`` is shown to the cashier.
    """

    error_code: str
    message: str
    hint: str | None = None
    detail: str | None = Field(default=None, description="JSON-encoded error details")
    path: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
