"""Purchase order domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class POStatus(str, Enum):
    """Purchase order lifecycle."""

    DRAFT = "Draft"
    SENT = "Sent"
    PARTIALLY_RECEIVED = "Partially Received"
    RECEIVED = "Received"
    CANCELLED = "Cancelled"


class PurchaseOrderItem(BaseModel):
    """An ordered product line."""

    product_id: str
    product_name: str
    quantity: float = Field(gt=0)
    cost: float = Field(ge=0)
    quantity_received: float = Field(default=0.0, ge=0)
    unit_of_measure: str = "pc(s)"

    @model_validator(mode="after")
    def check_received(self) -> "PurchaseOrderItem":
        if self.quantity_received > self.quantity:
            raise ValueError("quantity_received cannot exceed quantity ordered")
        return self

    @property
    def outstanding(self) -> float:
        return self.quantity - self.quantity_received

    @property
    def is_complete(self) -> bool:
        return self.quantity_received >= self.quantity


class PurchaseOrder(BaseModel):
    """An order placed with a supplier."""

    id: str
    po_number: str
    supplier_id: str
    items: list[PurchaseOrderItem]
    status: POStatus = POStatus.DRAFT
    created_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    expected_date: datetime | None = None
    received_date: datetime | None = None
    total_cost: float = 0.0

    @model_validator(mode="after")
    def compute_total(self) -> "PurchaseOrder":
        """total_cost is always the ordered value."""
        self.total_cost = sum(i.cost * i.quantity for i in self.items)
        return self

    def line_for(self, product_id: str) -> PurchaseOrderItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None


class ReceivedItem(BaseModel):
    """One line of a delivery batch."""

    product_id: str
    quantity: float
    category: str | None = None
    ean: str | None = None
