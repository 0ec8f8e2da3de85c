"""Cart Use Case."""

from kenpos.application.dto.requests import AddToCartRequest
from kenpos.application.dto.responses import CartResponse, CartTotalsResponse
from kenpos.application.locks import AggregateLocks, cart_key, get_aggregate_locks
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import Cart, Product
from kenpos.core.exceptions import RecordNotFoundError
from kenpos.core.interfaces.storage import Collection, IPersistenceStore
from kenpos.core.services.cart import add_to_cart, remove_from_cart, set_quantity
from kenpos.core.services.pricing import cart_totals

logger = get_logger(__name__)


class CartUseCase:
    """One open cart per cashier, persisted between requests.

    Stock checks here are advisory; the authoritative check happens when
    the sale is completed.
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

    async def _load(self, repos: Repositories, cashier_id: str) -> Cart:
        return await repos.carts.get(cashier_id) or Cart(id=cashier_id)

    async def _sellable(self, repos: Repositories, product_id: str) -> Product:
        product = await repos.products.get(product_id)
        if product is None or not product.is_active:
            raise RecordNotFoundError(Collection.PRODUCTS.value, product_id)
        return product

    async def get(self, cashier_id: str) -> Cart:
        return await self._load(Repositories.bind(await self._get_store()), cashier_id)

    async def add_item(self, cashier_id: str, request: AddToCartRequest) -> Cart:
        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            repos = Repositories.bind(store)
            product = await self._sellable(repos, request.product_id)
            cart = add_to_cart(await self._load(repos, cashier_id), product, request.quantity)
            await repos.carts.save(cart)

        logger.info(
            "cart_item_added",
            cashier_id=cashier_id,
            product_id=product.id,
            quantity=request.quantity,
        )
        return cart

    async def update_quantity(self, cashier_id: str, product_id: str, quantity: float) -> Cart:
        """Set a line's quantity; zero or less removes it."""
        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            repos = Repositories.bind(store)
            cart = await self._load(repos, cashier_id)
            if quantity <= 0:
                cart = remove_from_cart(cart, product_id)
            else:
                product = await self._sellable(repos, product_id)
                cart = set_quantity(cart, product, quantity)
            await repos.carts.save(cart)
        return cart

    async def remove_item(self, cashier_id: str, product_id: str) -> Cart:
        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            repos = Repositories.bind(store)
            cart = remove_from_cart(await self._load(repos, cashier_id), product_id)
            await repos.carts.save(cart)
        return cart

    async def set_customer(self, cashier_id: str, customer_id: str) -> Cart:
        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            repos = Repositories.bind(store)
            settings = self._settings or get_settings()
            if customer_id != settings.loyalty.default_customer_id:
                await repos.customers.require(customer_id)
            cart = await self._load(repos, cashier_id)
            cart.customer_id = customer_id
            await repos.carts.save(cart)
        return cart

    async def clear(self, cashier_id: str) -> None:
        """Drop the cart, including any quotation linkage."""
        store = await self._get_store()
        async with self._locks.hold(cart_key(cashier_id)):
            await Repositories.bind(store).carts.remove(cashier_id)
        logger.info("cart_cleared", cashier_id=cashier_id)

    def to_response(self, cart: Cart) -> CartResponse:
        """Cart with totals before any checkout discount or points."""
        settings = self._settings or get_settings()
        totals = cart_totals(cart.items, vat_rate=settings.tax.effective_rate).rounded()
        return CartResponse(
            cart=cart,
            totals=CartTotalsResponse(
                subtotal=totals.subtotal,
                discount_amount=totals.discount_amount,
                tax=totals.tax,
                total=totals.total,
            ),
        )
