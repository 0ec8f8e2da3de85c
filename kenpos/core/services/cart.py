"""
Cart rules.

Stock and quantity checks applied while a cashier builds a cart. Functions
return a new Cart and never mutate their input.
"""

from kenpos.core.entities.product import Cart, CartItem, Product, allows_fraction
from kenpos.core.exceptions import (
    InsufficientStockError,
    OutOfStockError,
    ValidationError,
)
from kenpos.core.services.pricing import to_number


def check_quantity(product: Product, quantity: float) -> None:
    """Validate a line quantity against the product's unit and stock."""
    if not allows_fraction(product.unit_of_measure) and not float(quantity).is_integer():
        raise ValidationError(
            "quantity",
            f"{product.unit_of_measure} is sold in whole units",
            quantity,
        )
    if product.tracks_stock and quantity > product.stock:
        raise InsufficientStockError(product.id, quantity, product.stock)


def add_to_cart(cart: Cart, product: Product, quantity: float = 1) -> Cart:
    """Add ``quantity`` of a product, merging with an existing line."""
    quantity = to_number(quantity)
    if quantity <= 0:
        raise ValidationError("quantity", "must be greater than zero", quantity)
    if product.tracks_stock and product.stock <= 0:
        raise OutOfStockError(product.id, product.name)

    updated = cart.model_copy(deep=True)
    existing = updated.find(product.id)
    new_quantity = quantity + (existing.quantity if existing else 0)
    check_quantity(product, new_quantity)

    if existing:
        existing.quantity = new_quantity
    else:
        updated.items.append(CartItem.from_product(product, new_quantity))
    return updated


def set_quantity(cart: Cart, product: Product, quantity: float) -> Cart:
    """Set a line's quantity; zero or less removes the line."""
    quantity = to_number(quantity)
    if quantity <= 0:
        return remove_from_cart(cart, product.id)

    check_quantity(product, quantity)
    updated = cart.model_copy(deep=True)
    existing = updated.find(product.id)
    if existing:
        existing.quantity = quantity
    else:
        updated.items.append(CartItem.from_product(product, quantity))
    return updated


def remove_from_cart(cart: Cart, product_id: str) -> Cart:
    updated = cart.model_copy(deep=True)
    updated.items = [item for item in updated.items if item.product_id != product_id]
    return updated
