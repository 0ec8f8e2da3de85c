"""Complete Sale Use Case: checkout of a cashier's cart as one unit of work."""

from collections import defaultdict
from dataclasses import dataclass

from kenpos.application.audit import record_audit
from kenpos.application.connectivity import ConnectivityState, get_connectivity
from kenpos.application.dto.requests import CompleteSaleRequest
from kenpos.application.dto.responses import CompleteSaleResponse
from kenpos.application.locks import (
    AggregateLocks,
    cart_key,
    customer_key,
    get_aggregate_locks,
    product_key,
    shift_key,
)
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import (
    MONEY_EPSILON,
    AuditAction,
    Cart,
    Customer,
    Payment,
    PaymentMethod,
    Sale,
)
from kenpos.core.exceptions import (
    EmptyCartError,
    InsufficientPaymentError,
    InsufficientStockError,
    NoActiveShiftError,
    OverpaymentError,
    RecordNotFoundError,
    ValidationError,
)
from kenpos.core.interfaces.storage import Collection, IPersistenceStore
from kenpos.core.services.identifiers import new_id
from kenpos.core.services.loyalty import LoyaltyLedger
from kenpos.core.services.pricing import Discount, cart_totals, round_money
from kenpos.core.services.shift_reconciliation import active_shift_for

logger = get_logger(__name__)


@dataclass
class CompleteSaleResult:
    """Result of completing a sale."""

    sale: Sale
    queued: bool  # stored in the offline queue
    customer: Customer | None = None


class CompleteSaleUseCase:
    """Turn a cart into a persisted sale.

    Shift linkage, stock decrements, loyalty update, sale persistence, audit
    entry and cart removal commit together in one store transaction, under
    the locks of the cart, shift, customer and every sold product. Any
    failure leaves all of them untouched.
    """

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        settings: Settings | None = None,
        connectivity: ConnectivityState | None = None,
        locks: AggregateLocks | None = None,
    ):
        self._store = store
        self._settings = settings
        self._connectivity = connectivity
        self._locks = locks or get_aggregate_locks()

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def execute(self, request: CompleteSaleRequest) -> CompleteSaleResult:
        """Execute complete sale use case."""
        settings = self._settings or get_settings()
        connectivity = self._connectivity or get_connectivity()
        store = await self._get_store()
        cashier_id = request.cashier_id

        logger.info(
            "complete_sale_started",
            cashier_id=cashier_id,
            payments=len(request.payments),
            points_requested=request.points_to_redeem,
        )

        # Cart lock first: the product locks depend on the cart contents
        async with self._locks.hold(cart_key(cashier_id)):
            cart = await Repositories.bind(store).carts.get(cashier_id)
            if cart is None or cart.is_empty:
                raise EmptyCartError(cashier_id)

            customer_id = (
                request.customer_id
                or cart.customer_id
                or settings.loyalty.default_customer_id
            )
            keys = [shift_key(cashier_id), customer_key(customer_id)]
            keys += [product_key(item.product_id) for item in cart.items]

            async with self._locks.hold(*keys):
                async with store.transaction() as tx:
                    sale, customer = await self._complete(
                        Repositories.bind(tx),
                        request,
                        cart,
                        customer_id,
                        settings,
                        online=connectivity.is_online,
                    )

        queued = not sale.synced
        logger.info(
            "complete_sale_complete",
            sale_id=sale.id,
            total=sale.total,
            change=sale.change,
            points_earned=sale.points_earned,
            queued=queued,
        )
        return CompleteSaleResult(sale=sale, queued=queued, customer=customer)

    async def _complete(
        self,
        repos: Repositories,
        request: CompleteSaleRequest,
        cart: Cart,
        customer_id: str,
        settings: Settings,
        online: bool,
    ) -> tuple[Sale, Customer | None]:
        cashier_id = request.cashier_id

        # 1. Preconditions (no writes yet)
        shift = active_shift_for(await repos.shifts.list(), cashier_id)
        if shift is None:
            raise NoActiveShiftError(cashier_id)

        customer = await repos.customers.get(customer_id)
        if customer is None and customer_id != settings.loyalty.default_customer_id:
            raise RecordNotFoundError(Collection.CUSTOMERS.value, customer_id)

        discount = None
        if settings.discount.enabled and request.discount_value:
            discount = Discount(type=settings.discount.type, value=request.discount_value)
        totals = cart_totals(
            cart.items,
            discount=discount,
            vat_rate=settings.tax.effective_rate,
            max_discount=settings.discount.max_value,
        ).rounded()

        loyalty = LoyaltyLedger(settings.loyalty).settle(
            customer, totals.total, request.points_to_redeem
        )
        amount_due = round_money(totals.total - loyalty.points_value)

        payments, change = self._settle_payments(request, amount_due)

        products = {}
        required: dict[str, float] = defaultdict(float)
        for item in cart.items:
            if item.tracks_stock:
                required[item.product_id] += item.quantity
        for product_id, quantity in required.items():
            product = await repos.products.require(product_id)
            if product.tracks_stock and product.stock < quantity:
                raise InsufficientStockError(product_id, quantity, product.stock)
            products[product_id] = product

        # 2. Build the sale
        if loyalty.points_value > 0:
            payments.append(Payment(method=PaymentMethod.POINTS, amount=loyalty.points_value))

        sale = Sale(
            id=new_id(settings.receipt.invoice_prefix),
            items=cart.items,
            subtotal=totals.subtotal,
            discount_amount=totals.discount_amount,
            tax=totals.tax,
            total=amount_due,
            payments=payments,
            change=change,
            customer_id=customer_id,
            cashier_id=cashier_id,
            shift_id=shift.id,
            synced=online,
            points_earned=loyalty.points_earned,
            points_used=loyalty.points_used,
            points_value=loyalty.points_value,
            points_balance_after=loyalty.balance_after,
            quotation_id=cart.quotation_id,
        )

        # 3. Writes
        shift.sales_ids.append(sale.id)
        await repos.shifts.save(shift)

        for product_id, quantity in required.items():
            product = products[product_id]
            if product.tracks_stock:
                product.stock -= quantity
                await repos.products.save(product)

        if customer is not None and loyalty.balance_after is not None:
            customer.loyalty_points = loyalty.balance_after
            await repos.customers.save(customer)

        if online:
            await repos.sales.save(sale)
        else:
            await repos.order_queue.save(sale)

        await record_audit(
            repos,
            cashier_id,
            AuditAction.SALE_COMPLETE,
            {"sale_id": sale.id, "total": sale.total, "offline": not online},
        )
        await repos.carts.remove(cashier_id)

        return sale, customer

    @staticmethod
    def _settle_payments(
        request: CompleteSaleRequest, amount_due: float
    ) -> tuple[list[Payment], float]:
        """Validate tenders and compute change."""
        payments = []
        for p in request.payments:
            if p.method == PaymentMethod.POINTS:
                raise ValidationError(
                    "payments", "points are redeemed via points_to_redeem", p.method.value
                )
            if p.amount > 0:
                payments.append(Payment(**p.model_dump()))

        tendered = round_money(sum(p.amount for p in payments))
        if tendered + MONEY_EPSILON < amount_due:
            raise InsufficientPaymentError(amount_due, tendered)

        change = round_money(max(0.0, tendered - amount_due))
        cash = round_money(sum(p.amount for p in payments if p.method == PaymentMethod.CASH))
        if change > cash + MONEY_EPSILON:
            raise OverpaymentError("change exceeds cash tendered", change, cash)
        return payments, change

    def to_response(self, result: CompleteSaleResult) -> CompleteSaleResponse:
        """Convert result to API response."""
        return CompleteSaleResponse(
            sale=result.sale, queued=result.queued, customer=result.customer
        )
