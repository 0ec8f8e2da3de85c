"""Sale and payment domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from kenpos.core.entities.product import CartItem

# Float tolerance for comparisons of values rounded to cents
MONEY_EPSILON = 0.005


class PaymentMethod(str, Enum):
    """Tender types accepted at the till."""

    CASH = "Cash"
    MPESA = "M-Pesa"
    CARD = "Card"
    POINTS = "Points"


class Payment(BaseModel):
    """A single tender against a sale."""

    method: PaymentMethod
    amount: float = Field(ge=0)
    transaction_code: str | None = None
    phone_number: str | None = None


class Sale(BaseModel):
    """A completed sale. Immutable after creation except for the synced flag."""

    id: str
    items: list[CartItem]
    subtotal: float
    discount_amount: float = 0.0
    tax: float = 0.0
    total: float  # amount due after redeemed points
    payments: list[Payment] = Field(default_factory=list)
    change: float = 0.0
    customer_id: str
    cashier_id: str
    shift_id: str
    date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    synced: bool = False
    points_earned: int = 0
    points_used: int = 0
    points_value: float = 0.0
    points_balance_after: int | None = None
    quotation_id: str | None = None

    @model_validator(mode="after")
    def check_amounts(self) -> "Sale":
        """Stored components add up to the total and tenders cover it."""
        expected = self.subtotal - self.discount_amount + self.tax - self.points_value
        if abs(expected - self.total) > MONEY_EPSILON:
            raise ValueError(
                f"total {self.total} does not match components ({expected:.2f})"
            )
        if self.tendered + self.points_value + MONEY_EPSILON < self.total:
            raise ValueError("payments do not cover the sale total")
        return self

    @property
    def tendered(self) -> float:
        """Money tendered, excluding the points entry."""
        return sum(p.amount for p in self.payments if p.method != PaymentMethod.POINTS)

    @property
    def gross_total(self) -> float:
        """Total before points were applied."""
        return self.total + self.points_value
