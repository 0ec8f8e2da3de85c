"""
Receive Purchase Order Use Case.

Adds stock, advances the order and raises the supplier invoice.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import ReceivePurchaseOrderRequest
from kenpos.application.dto.responses import ReceivePurchaseOrderResponse
from kenpos.application.locks import (
    AggregateLocks,
    get_aggregate_locks,
    product_key,
    purchase_order_key,
)
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import (
    DEFAULT_CREDIT_DAYS,
    AuditAction,
    POStatus,
    PurchaseOrder,
    SupplierInvoice,
)
from kenpos.core.exceptions import InvalidStateTransitionError
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.identifiers import next_suffix, supplier_invoice_number
from kenpos.core.services.pricing import price_breakdown, round_money, round_quantity
from kenpos.core.services.receiving import ReceiptOutcome, apply_receipt

logger = get_logger(__name__)

# Receiving a fully received order is accepted and changes nothing
_RECEIVABLE = {POStatus.SENT, POStatus.PARTIALLY_RECEIVED, POStatus.RECEIVED}


@dataclass
class ReceivePurchaseOrderResult:
    """Result of receiving a delivery batch."""

    purchase_order: PurchaseOrder
    invoice: SupplierInvoice | None = None
    received_quantities: dict[str, float] = field(default_factory=dict)
    ignored_product_ids: list[str] = field(default_factory=list)


class ReceivePurchaseOrderUseCase:
    """Apply a delivery batch to a purchase order.

    Quantities are clamped to what is outstanding per line. Stock of
    Inventory products rises by exactly the applied quantity, and one
    supplier invoice is raised for the applied value. A batch that applies
    nothing writes nothing.
    """

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        settings: Settings | None = None,
        locks: AggregateLocks | None = None,
    ):
        self._store = store
        self._settings = settings
        self._locks = locks or get_aggregate_locks()

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def execute(
        self, po_id: str, request: ReceivePurchaseOrderRequest
    ) -> ReceivePurchaseOrderResult:
        """Execute receive purchase order use case."""
        settings = self._settings or get_settings()
        logger.info("receive_purchase_order_started", po_id=po_id, lines=len(request.items))

        keys = [purchase_order_key(po_id)]
        keys += [product_key(item.product_id) for item in request.items]

        store = await self._get_store()
        async with self._locks.hold(*keys):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                po = await repos.purchase_orders.require(po_id)
                if po.status not in _RECEIVABLE:
                    raise InvalidStateTransitionError(
                        "purchase order", po_id, po.status.value, "receive"
                    )

                outcome = apply_receipt(po, request.items)
                if outcome.ignored_product_ids:
                    logger.warning(
                        "receive_lines_not_on_order",
                        po_id=po_id,
                        product_ids=outcome.ignored_product_ids,
                    )
                if not outcome.received_anything:
                    logger.info("receive_purchase_order_nothing_applied", po_id=po_id)
                    return ReceivePurchaseOrderResult(
                        purchase_order=po,
                        ignored_product_ids=outcome.ignored_product_ids,
                    )

                await self._apply_stock(repos, outcome)
                await repos.purchase_orders.save(outcome.purchase_order)
                invoice = await self._raise_invoice(repos, outcome, settings)

                await record_audit(
                    repos,
                    request.user_id,
                    AuditAction.RECEIVE_PO,
                    {
                        "po_id": po_id,
                        "invoice_id": invoice.id,
                        "total": invoice.total_amount,
                        "status": outcome.purchase_order.status.value,
                    },
                )

        received: dict[str, float] = {}
        for delta in outcome.stock_deltas:
            received[delta.product_id] = round_quantity(
                received.get(delta.product_id, 0.0) + delta.quantity
            )
        logger.info(
            "receive_purchase_order_complete",
            po_id=po_id,
            status=outcome.purchase_order.status.value,
            invoice_id=invoice.id,
            invoice_total=invoice.total_amount,
        )
        return ReceivePurchaseOrderResult(
            purchase_order=outcome.purchase_order,
            invoice=invoice,
            received_quantities=received,
            ignored_product_ids=outcome.ignored_product_ids,
        )

    async def _apply_stock(self, repos: Repositories, outcome: ReceiptOutcome) -> None:
        for delta in outcome.stock_deltas:
            product = await repos.products.get(delta.product_id)
            if product is None:
                logger.warning("received_product_missing", product_id=delta.product_id)
                continue
            if product.tracks_stock:
                product.stock += delta.quantity
            if delta.category:
                product.category = delta.category
            if delta.ean:
                product.ean = delta.ean
            await repos.products.save(product)

    async def _raise_invoice(
        self, repos: Repositories, outcome: ReceiptOutcome, settings: Settings
    ) -> SupplierInvoice:
        po = outcome.purchase_order
        supplier = await repos.suppliers.get(po.supplier_id)
        credit_days = supplier.credit_days if supplier else DEFAULT_CREDIT_DAYS

        breakdown = price_breakdown(
            outcome.total_cost, settings.tax.pricing_type, settings.tax.effective_rate
        )
        invoice_date = datetime.now(UTC)
        suffix = next_suffix()
        invoice = SupplierInvoice(
            id=f"inv_{suffix}",
            invoice_number=supplier_invoice_number(po.po_number, suffix),
            purchase_order_id=po.id,
            supplier_id=po.supplier_id,
            invoice_date=invoice_date,
            due_date=invoice_date + timedelta(days=credit_days),
            subtotal=round_money(breakdown.base_price),
            tax_amount=round_money(breakdown.vat_amount),
            total_amount=round_money(outcome.total_cost),
        )
        return await repos.supplier_invoices.save(invoice)

    def to_response(self, result: ReceivePurchaseOrderResult) -> ReceivePurchaseOrderResponse:
        """Convert result to API response."""
        return ReceivePurchaseOrderResponse(
            purchase_order=result.purchase_order,
            invoice=result.invoice,
            received_quantities=result.received_quantities,
            ignored_product_ids=result.ignored_product_ids,
        )
