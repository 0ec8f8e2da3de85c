"""
Purchase order receiving.

Pure transition: given a purchase order and a delivery batch, compute the
updated order, the stock increments and the value received. Nothing here
touches storage; the receiving use case persists the outcome.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from kenpos.core.entities.purchase import POStatus, PurchaseOrder, ReceivedItem
from kenpos.core.services.pricing import round_quantity, to_number


@dataclass(frozen=True)
class StockDelta:
    product_id: str
    quantity: float
    category: str | None = None
    ean: str | None = None


@dataclass(frozen=True)
class ReceiptOutcome:
    purchase_order: PurchaseOrder
    stock_deltas: list[StockDelta] = field(default_factory=list)
    total_cost: float = 0.0
    ignored_product_ids: list[str] = field(default_factory=list)

    @property
    def received_anything(self) -> bool:
        return bool(self.stock_deltas)


def derive_status(po: PurchaseOrder) -> POStatus:
    """Status implied by receipt completeness."""
    if all(item.is_complete for item in po.items):
        return POStatus.RECEIVED
    if any(item.quantity_received > 0 for item in po.items):
        return POStatus.PARTIALLY_RECEIVED
    return po.status


def apply_receipt(
    po: PurchaseOrder,
    batch: Iterable[ReceivedItem],
    received_at: datetime | None = None,
) -> ReceiptOutcome:
    """Apply a delivery batch to a purchase order.

    Each batch quantity is clamped to what is still outstanding on the line,
    so a line can never be received beyond its ordered quantity. Received
    quantities are kept to three decimals, so fractional deliveries that add
    up to the ordered weight or volume complete the line. Batch lines
    for products that are not on the order are reported and skipped.

    Args:
        po: Current purchase order (left unmodified)
        batch: Delivered quantities per product
        received_at: Timestamp for ``received_date``

    Returns:
        ReceiptOutcome with the new order value and applied quantities
    """
    updated = po.model_copy(deep=True)
    deltas: list[StockDelta] = []
    ignored: list[str] = []
    total_cost = 0.0

    for received in batch:
        line = updated.line_for(received.product_id)
        if line is None:
            ignored.append(received.product_id)
            continue

        arrived = line.quantity_received + max(to_number(received.quantity), 0.0)
        if round_quantity(arrived) >= round_quantity(line.quantity):
            new_received = line.quantity
        else:
            new_received = round_quantity(arrived)
        applied = round_quantity(new_received - line.quantity_received)
        if applied <= 0:
            continue

        line.quantity_received = new_received
        total_cost += line.cost * applied
        deltas.append(
            StockDelta(
                product_id=line.product_id,
                quantity=applied,
                category=received.category,
                ean=received.ean,
            )
        )

    if deltas:
        updated.status = derive_status(updated)
        updated.received_date = received_at or datetime.now(UTC)

    return ReceiptOutcome(
        purchase_order=updated,
        stock_deltas=deltas,
        total_cost=total_cost,
        ignored_product_ids=ignored,
    )
