"""Product and cart domain entities."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

# Units sold in fractional quantities; everything else sells in whole units
FRACTIONAL_UNITS = frozenset({"m", "kg", "g", "ltr", "sq ft"})


class PricingType(str, Enum):
    """Whether a price already includes VAT."""

    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


class ProductType(str, Enum):
    """Stock tracking mode of a product."""

    INVENTORY = "Inventory"
    SERVICE = "Service"


def allows_fraction(unit_of_measure: str) -> bool:
    return unit_of_measure.strip().lower() in FRACTIONAL_UNITS


class Product(BaseModel):
    """A sellable product or service."""

    id: str
    name: str
    sku: str = ""
    ean: str | None = None
    category: str = "General"
    price: float = Field(ge=0)
    pricing_type: PricingType = PricingType.INCLUSIVE
    product_type: ProductType = ProductType.INVENTORY
    cost_price: float | None = Field(default=None, ge=0)
    stock: float = 0.0
    unit_of_measure: str = "pc(s)"
    is_active: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def tracks_stock(self) -> bool:
        return self.product_type == ProductType.INVENTORY


class CartItem(BaseModel):
    """A product snapshot with a quantity, frozen into the sale on completion."""

    product_id: str
    name: str
    sku: str = ""
    price: float = Field(ge=0)
    pricing_type: PricingType = PricingType.INCLUSIVE
    product_type: ProductType = ProductType.INVENTORY
    cost_price: float | None = None
    unit_of_measure: str = "pc(s)"
    quantity: float

    @model_validator(mode="after")
    def check_quantity(self) -> "CartItem":
        """Quantities are positive and whole unless the unit is fractional."""
        if self.quantity <= 0:
            raise ValueError("quantity must be greater than zero")
        if not allows_fraction(self.unit_of_measure) and not float(self.quantity).is_integer():
            raise ValueError(
                f"quantity for unit '{self.unit_of_measure}' must be a whole number"
            )
        return self

    @property
    def line_total(self) -> float:
        """Extended price at the item's own pricing type."""
        return self.price * self.quantity

    @property
    def tracks_stock(self) -> bool:
        return self.product_type == ProductType.INVENTORY

    @classmethod
    def from_product(
        cls, product: Product, quantity: float, price: float | None = None
    ) -> "CartItem":
        """Snapshot a product into a cart line, optionally at an agreed price."""
        return cls(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            price=product.price if price is None else price,
            pricing_type=product.pricing_type,
            product_type=product.product_type,
            cost_price=product.cost_price,
            unit_of_measure=product.unit_of_measure,
            quantity=quantity,
        )


class Cart(BaseModel):
    """The open cart of one cashier."""

    id: str  # cashier id
    items: list[CartItem] = Field(default_factory=list)
    customer_id: str | None = None
    quotation_id: str | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find(self, product_id: str) -> CartItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None
