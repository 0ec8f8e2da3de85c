"""Quotation use cases: pricing offers and loading them into a cart."""

from datetime import UTC, datetime, timedelta

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import CreateQuotationRequest
from kenpos.application.locks import AggregateLocks, cart_key, get_aggregate_locks
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import (
    AuditAction,
    Cart,
    CartItem,
    Quotation,
    QuotationItem,
    QuotationStatus,
)
from kenpos.core.exceptions import (
    InsufficientStockError,
    InvalidStateTransitionError,
    NoActiveShiftError,
    RecordNotFoundError,
)
from kenpos.core.interfaces.storage import Collection, IPersistenceStore
from kenpos.core.services.identifiers import next_suffix
from kenpos.core.services.pricing import cart_totals
from kenpos.core.services.shift_reconciliation import active_shift_for

logger = get_logger(__name__)

_CONVERTIBLE = {QuotationStatus.DRAFT, QuotationStatus.SENT}


class QuotationUseCase:
    """Create quotations and convert them into a cashier's cart."""

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

    async def create(self, request: CreateQuotationRequest) -> Quotation:
        settings = self._settings or get_settings()
        logger.info(
            "create_quotation_started",
            customer_id=request.customer_id,
            lines=len(request.items),
        )

        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            if request.customer_id != settings.loyalty.default_customer_id:
                await repos.customers.require(request.customer_id)

            items = []
            for line in request.items:
                product = await repos.products.require(line.product_id)
                items.append(
                    QuotationItem(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=line.quantity,
                        price=product.price if line.price is None else line.price,
                        pricing_type=product.pricing_type,
                    )
                )

            totals = cart_totals(items, vat_rate=settings.tax.effective_rate).rounded()
            suffix = next_suffix()
            created = datetime.now(UTC)
            quotation = Quotation(
                id=f"quote_{suffix}",
                quote_number=f"{settings.receipt.quote_prefix}{suffix}",
                customer_id=request.customer_id,
                items=items,
                created_date=created,
                expiry_date=created + timedelta(days=request.valid_days),
                subtotal=totals.subtotal,
                tax=totals.tax,
                total=totals.total,
            )
            await repos.quotations.save(quotation)
            await record_audit(
                repos,
                request.user_id,
                AuditAction.ADD_QUOTATION,
                {"quotation_id": quotation.id, "total": quotation.total},
            )

        logger.info(
            "create_quotation_complete",
            quotation_id=quotation.id,
            total=quotation.total,
        )
        return quotation

    async def convert_to_cart(self, quotation_id: str, cashier_id: str) -> Cart:
        """Load a quotation into the cashier's cart at the quoted prices.

        Every line must still be in stock; otherwise nothing changes.
        """
        logger.info(
            "convert_quotation_started",
            quotation_id=quotation_id,
            cashier_id=cashier_id,
        )

        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            async with store.transaction() as tx:
                repos = Repositories.bind(tx)
                if active_shift_for(await repos.shifts.list(), cashier_id) is None:
                    raise NoActiveShiftError(cashier_id)

                quotation = await repos.quotations.require(quotation_id)
                if quotation.status not in _CONVERTIBLE:
                    raise InvalidStateTransitionError(
                        "quotation", quotation_id, quotation.status.value, "convert"
                    )

                items = []
                for line in quotation.items:
                    product = await repos.products.get(line.product_id)
                    if product is None:
                        raise RecordNotFoundError(Collection.PRODUCTS.value, line.product_id)
                    if product.tracks_stock and product.stock < line.quantity:
                        raise InsufficientStockError(product.id, line.quantity, product.stock)
                    item = CartItem.from_product(product, line.quantity, price=line.price)
                    items.append(item.model_copy(update={"pricing_type": line.pricing_type}))

                cart = Cart(
                    id=cashier_id,
                    items=items,
                    customer_id=quotation.customer_id,
                    quotation_id=quotation.id,
                )
                await repos.carts.save(cart)

                quotation.status = QuotationStatus.INVOICED
                await repos.quotations.save(quotation)
                await record_audit(
                    repos,
                    cashier_id,
                    AuditAction.CONVERT_QUOTE,
                    {"quotation_id": quotation.id, "quote_number": quotation.quote_number},
                )

        logger.info("convert_quotation_complete", quotation_id=quotation_id, lines=len(items))
        return cart
