"""Cashier shift domain entity."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ShiftStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class Shift(BaseModel):
    """A cashier's working session.

    Closing fields are populated exactly once when the shift is ended.
    """

    id: str
    user_id: str
    user_name: str | None = None
    start_time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    status: ShiftStatus = ShiftStatus.ACTIVE
    starting_float: float = Field(default=0.0, ge=0)
    sales_ids: list[str] = Field(default_factory=list)

    # Closing fields
    payment_breakdown: dict[str, float] | None = None
    total_sales: float | None = None
    total_change: float | None = None
    expected_cash_in_drawer: float | None = None
    actual_cash_in_drawer: float | None = None
    cash_variance: float | None = None

    @property
    def is_active(self) -> bool:
        return self.status == ShiftStatus.ACTIVE
