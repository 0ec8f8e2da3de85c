"""Registry use cases for customers, suppliers and products."""

from kenpos.application.audit import record_audit
from kenpos.application.dto.requests import (
    RegisterCustomerRequest,
    RegisterProductRequest,
    RegisterSupplierRequest,
)
from kenpos.application.repository import Repositories
from kenpos.config import get_logger, get_settings
from kenpos.config.settings import Settings
from kenpos.core.entities import AuditAction, Customer, Product, ProductType, Supplier
from kenpos.core.exceptions import (
    DuplicateCustomerError,
    DuplicateSupplierError,
    ProtectedRecordError,
    RecordNotFoundError,
)
from kenpos.core.interfaces.storage import Collection, IPersistenceStore
from kenpos.core.services.identifiers import new_id

logger = get_logger(__name__)

# Phone placeholder that may repeat across customers
NO_PHONE = "N/A"

# Services never run out
SERVICE_STOCK = 9999


class RegistryUseCase:
    """Master data with uniqueness rules."""

    def __init__(
        self,
        store: IPersistenceStore | None = None,
        settings: Settings | None = None,
    ):
        self._store = store
        self._settings = settings

    async def _get_store(self) -> IPersistenceStore:
        if self._store is None:
            from kenpos.infrastructure.storage.sqlite import get_persistence_store

            self._store = await get_persistence_store()
        return self._store

    async def register_customer(self, request: RegisterCustomerRequest) -> Customer:
        """Add a customer; phone numbers are unique unless 'N/A'."""
        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            phone = request.phone.strip() or NO_PHONE
            if phone != NO_PHONE:
                for existing in await repos.customers.list():
                    if existing.phone == phone:
                        raise DuplicateCustomerError(phone, existing.id)

            customer = Customer(
                id=new_id("cust_"),
                name=request.name.strip(),
                phone=phone,
                email=request.email,
                address=request.address,
                city=request.city,
            )
            await repos.customers.save(customer)
            await record_audit(
                repos,
                request.user_id,
                AuditAction.ADD_CUSTOMER,
                {"customer_id": customer.id, "name": customer.name},
            )

        logger.info("customer_registered", customer_id=customer.id)
        return customer

    async def delete_customer(self, customer_id: str, user_id: str) -> None:
        settings = self._settings or get_settings()
        if customer_id == settings.loyalty.default_customer_id:
            raise ProtectedRecordError(
                Collection.CUSTOMERS.value, customer_id, "walk-in customer"
            )

        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            if not await repos.customers.remove(customer_id):
                raise RecordNotFoundError(Collection.CUSTOMERS.value, customer_id)
            await record_audit(
                repos, user_id, AuditAction.DELETE_CUSTOMER, {"customer_id": customer_id}
            )

        logger.info("customer_deleted", customer_id=customer_id)

    async def ensure_walk_in_customer(self) -> Customer:
        """Create the walk-in customer on first start."""
        settings = self._settings or get_settings()
        repos = Repositories.bind(await self._get_store())
        existing = await repos.customers.get(settings.loyalty.default_customer_id)
        if existing is not None:
            return existing
        customer = Customer(id=settings.loyalty.default_customer_id, name="Walk-in Customer")
        await repos.customers.save(customer)
        logger.info("walk_in_customer_created", customer_id=customer.id)
        return customer

    async def register_supplier(self, request: RegisterSupplierRequest) -> Supplier:
        """Add a supplier; names are unique ignoring case."""
        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            name = request.name.strip()
            for existing in await repos.suppliers.list():
                if existing.name.strip().lower() == name.lower():
                    raise DuplicateSupplierError(name, existing.id)

            supplier = Supplier(
                id=new_id("sup_"),
                name=name,
                contact=request.contact,
                email=request.email,
                credit_terms=request.credit_terms,
            )
            await repos.suppliers.save(supplier)
            await record_audit(
                repos,
                request.user_id,
                AuditAction.ADD_SUPPLIER,
                {"supplier_id": supplier.id, "name": supplier.name},
            )

        logger.info("supplier_registered", supplier_id=supplier.id)
        return supplier

    async def register_product(self, request: RegisterProductRequest) -> Product:
        """Add a product. Inventory starts empty and is stocked by receiving."""
        store = await self._get_store()
        async with store.transaction() as tx:
            repos = Repositories.bind(tx)
            product = Product(
                id=new_id("prod_"),
                name=request.name.strip(),
                sku=request.sku,
                ean=request.ean,
                category=request.category,
                price=request.price,
                pricing_type=request.pricing_type,
                product_type=request.product_type,
                cost_price=request.cost_price,
                unit_of_measure=request.unit_of_measure,
                stock=SERVICE_STOCK if request.product_type == ProductType.SERVICE else 0,
            )
            await repos.products.save(product)
            await record_audit(
                repos,
                request.user_id,
                AuditAction.ADD_PRODUCT,
                {"product_id": product.id, "name": product.name},
            )

        logger.info("product_registered", product_id=product.id)
        return product
