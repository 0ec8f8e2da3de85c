"""Customer domain entity."""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """A customer with a loyalty balance."""

    id: str
    name: str
    phone: str = "N/A"
    email: str = "N/A"
    address: str | None = None
    city: str | None = None
    date_added: datetime = Field(default_factory=lambda: datetime.now(UTC))
    loyalty_points: int = Field(default=0, ge=0)
