"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
The acting user or cashier is always passed explicitly.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from kenpos.core.entities import (
    PaymentMethod,
    PricingType,
    ProductType,
    ReceivedItem,
    SupplierPaymentMethod,
)


# --- Cart / Sales ---


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: float = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Set a line quantity; zero or less removes the line."""

    quantity: float


class SetCartCustomerRequest(BaseModel):
    customer_id: str


class PaymentRequest(BaseModel):
    method: PaymentMethod
    amount: float = Field(ge=0)
    transaction_code: str | None = None
    phone_number: str | None = None


class CompleteSaleRequest(BaseModel):
    """Checkout of the cashier's current cart."""

    cashier_id: str
    payments: list[PaymentRequest] = Field(default_factory=list)
    discount_value: float = Field(
        default=0.0,
        description="Percentage or fixed amount depending on discount settings",
    )
    points_to_redeem: int = Field(default=0, ge=0)
    customer_id: str | None = Field(
        default=None,
        description="Overrides the customer attached to the cart",
    )


# --- Shifts ---


class StartShiftRequest(BaseModel):
    user_id: str
    starting_float: float
    user_name: str | None = None


class EndShiftRequest(BaseModel):
    user_id: str
    actual_cash_in_drawer: float


# --- Purchasing ---


class PurchaseOrderLineRequest(BaseModel):
    product_id: str
    quantity: float = Field(gt=0)
    cost: float | None = Field(
        default=None, ge=0, description="Defaults to the product's cost price"
    )


class CreatePurchaseOrderRequest(BaseModel):
    user_id: str
    supplier_id: str
    items: list[PurchaseOrderLineRequest] = Field(min_length=1)
    status: Literal["Draft", "Sent"] = "Draft"
    expected_date: datetime | None = None


class AddPurchaseOrderItemRequest(BaseModel):
    user_id: str
    product_id: str
    quantity: float = Field(gt=0)


class PurchaseOrderActionRequest(BaseModel):
    user_id: str


class ReceivePurchaseOrderRequest(BaseModel):
    user_id: str
    items: list[ReceivedItem]


class RecordSupplierPaymentRequest(BaseModel):
    user_id: str
    amount: float
    method: SupplierPaymentMethod = SupplierPaymentMethod.BANK_TRANSFER


# --- Registry ---


class RegisterCustomerRequest(BaseModel):
    user_id: str
    name: str = Field(min_length=1)
    phone: str = "N/A"
    email: str = "N/A"
    address: str | None = None
    city: str | None = None


class RegisterSupplierRequest(BaseModel):
    user_id: str
    name: str = Field(min_length=1)
    contact: str | None = None
    email: str | None = None
    credit_terms: str = "Net 30"


class RegisterProductRequest(BaseModel):
    user_id: str
    name: str = Field(min_length=1)
    sku: str = ""
    ean: str | None = None
    category: str = "General"
    price: float = Field(ge=0)
    pricing_type: PricingType = PricingType.INCLUSIVE
    product_type: ProductType = ProductType.INVENTORY
    cost_price: float | None = Field(default=None, ge=0)
    unit_of_measure: str = "pc(s)"


# --- Quotations ---


class QuotationLineRequest(BaseModel):
    product_id: str
    quantity: float = Field(gt=0)
    price: float | None = Field(default=None, ge=0, description="Defaults to list price")


class CreateQuotationRequest(BaseModel):
    user_id: str
    customer_id: str
    items: list[QuotationLineRequest] = Field(min_length=1)
    valid_days: int = Field(default=30, ge=1)


class ConvertQuotationRequest(BaseModel):
    cashier_id: str


# --- Sync ---


class ConnectivityRequest(BaseModel):
    online: bool
