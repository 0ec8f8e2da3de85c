"""Quotation domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from kenpos.core.entities.product import PricingType


class QuotationStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    INVOICED = "Invoiced"
    EXPIRED = "Expired"


class QuotationItem(BaseModel):
    product_id: str
    product_name: str
    quantity: float = Field(gt=0)
    price: float = Field(ge=0)
    pricing_type: PricingType = PricingType.INCLUSIVE


class Quotation(BaseModel):
    """A priced offer that can be converted into a sale."""

    id: str
    quote_number: str
    customer_id: str
    items: list[QuotationItem]
    status: QuotationStatus = QuotationStatus.DRAFT
    created_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    expiry_date: datetime | None = None
    subtotal: float = 0.0
    tax: float = 0.0
    total: float = 0.0
