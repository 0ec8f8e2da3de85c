"""
Purchase Order Use Case.

Authoring and lifecycle of purchase orders.
"""

from datetime import UTC, datetime, timedelta

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import (
    AddPurchaseOrderItemRequest,
    CreatePurchaseOrderRequest,
    PurchaseOrderLineRequest,
)
from kenpos.application.locks import (
    AggregateLocks,
    get_aggregate_locks,
    purchase_order_key,
)
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import AuditAction, POStatus, PurchaseOrder, PurchaseOrderItem
from kenpos.core.exceptions import InvalidStateTransitionError
from kenpos.core.interfaces.storage import IPersistenceStore
from kenpos.core.services.identifiers import next_suffix, po_number

logger = get_logger(__name__)

# Default lead time for orders raised from a single product
DEFAULT_LEAD_DAYS = 7

_CANCELLABLE = {POStatus.DRAFT, POStatus.SENT, POStatus.PARTIALLY_RECEIVED}
_EDITABLE = {POStatus.DRAFT, POStatus.SENT}


class PurchaseOrderUseCase:
    """Create, send, cancel and extend purchase orders."""

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

    async def create(self, request: CreatePurchaseOrderRequest) -> PurchaseOrder:
        """Raise a new order in Draft or Sent status."""
        settings = self._settings or get_settings()
        logger.info(
            "create_purchase_order_started",
            supplier_id=request.supplier_id,
            lines=len(request.items),
        )

        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            await repos.suppliers.require(request.supplier_id)

            lines: dict[str, PurchaseOrderItem] = {}
            for line in request.items:
                if line.product_id in lines:
                    lines[line.product_id].quantity += line.quantity
                    continue
                product = await repos.products.require(line.product_id)
                cost = line.cost if line.cost is not None else (product.cost_price or 0.0)
                lines[line.product_id] = PurchaseOrderItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=line.quantity,
                    cost=cost,
                    unit_of_measure=product.unit_of_measure,
                )

            suffix = next_suffix()
            po = PurchaseOrder(
                id=f"po_{suffix}",
                po_number=po_number(settings.receipt.po_number_prefix, suffix),
                supplier_id=request.supplier_id,
                items=list(lines.values()),
                status=POStatus(request.status),
                expected_date=request.expected_date,
            )
            await repos.purchase_orders.save(po)
            await record_audit(
                repos,
                request.user_id,
                AuditAction.ADD_PO,
                {"po_id": po.id, "po_number": po.po_number, "total_cost": po.total_cost},
            )

        logger.info(
            "create_purchase_order_complete",
            po_id=po.id,
            po_number=po.po_number,
            total_cost=po.total_cost,
        )
        return po

    async def send(self, po_id: str, user_id: str) -> PurchaseOrder:
        """Draft -> Sent."""
        return await self._transition(
            po_id, user_id, {POStatus.DRAFT}, POStatus.SENT, "send", AuditAction.SEND_PO
        )

    async def cancel(self, po_id: str, user_id: str) -> PurchaseOrder:
        return await self._transition(
            po_id, user_id, _CANCELLABLE, POStatus.CANCELLED, "cancel", AuditAction.CANCEL_PO
        )

    async def _transition(
        self,
        po_id: str,
        user_id: str,
        allowed: set[POStatus],
        target: POStatus,
        verb: str,
        action: AuditAction,
    ) -> PurchaseOrder:
        store = await self._get_store()
        async with self._locks.hold(purchase_order_key(po_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                po = await repos.purchase_orders.require(po_id)
                if po.status not in allowed:
                    raise InvalidStateTransitionError(
                        "purchase order", po_id, po.status.value, verb
                    )
                po.status = target
                await repos.purchase_orders.save(po)
                await record_audit(repos, user_id, action, {"po_id": po_id})

        logger.info("purchase_order_status_changed", po_id=po_id, status=target.value)
        return po

    async def add_item(self, po_id: str, request: AddPurchaseOrderItemRequest) -> PurchaseOrder:
        """Add a product to an open order, merging with an existing line."""
        store = await self._get_store()
        async with self._locks.hold(purchase_order_key(po_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                po = await repos.purchase_orders.require(po_id)
                if po.status not in _EDITABLE:
                    raise InvalidStateTransitionError(
                        "purchase order", po_id, po.status.value, "edit"
                    )
                product = await repos.products.require(request.product_id)

                line = po.line_for(product.id)
                if line is not None:
                    line.quantity += request.quantity
                else:
                    po.items.append(
                        PurchaseOrderItem(
                            product_id=product.id,
                            product_name=product.name,
                            quantity=request.quantity,
                            cost=product.cost_price or 0.0,
                            unit_of_measure=product.unit_of_measure,
                        )
                    )
                # Re-validate to recompute total_cost
                po = PurchaseOrder.model_validate(po.model_dump())
                await repos.purchase_orders.save(po)
                await record_audit(
                    repos,
                    request.user_id,
                    AuditAction.UPDATE_PO,
                    {"po_id": po_id, "product_id": product.id, "quantity": request.quantity},
                )

        logger.info("purchase_order_item_added", po_id=po_id, product_id=request.product_id)
        return po

    async def draft_for_product(
        self, supplier_id: str, product_id: str, quantity: float, user_id: str
    ) -> PurchaseOrder:
        """Start a Draft order for one product, due in a week."""
        return await self.create(
            CreatePurchaseOrderRequest(
                user_id=user_id,
                supplier_id=supplier_id,
                items=[PurchaseOrderLineRequest(product_id=product_id, quantity=quantity)],
                status="Draft",
                expected_date=datetime.now(UTC) + timedelta(days=DEFAULT_LEAD_DAYS),
            )
        )

    async def list_orders(self) -> list[PurchaseOrder]:
        repos = Repositories.bind(await self._get_store())
        return await repos.purchase_orders.list()
