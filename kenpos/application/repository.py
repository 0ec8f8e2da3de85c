"""
Typed access to record collections.

Repositories convert between stored JSON records and pydantic entities.
Bind them to the store returned by ``IPersistenceStore.transaction()`` to
take part in a unit of work.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from kenpos.core.entities import (
    AuditLog,
    Cart,
    Customer,
    Product,
    PurchaseOrder,
    Quotation,
    Sale,
    Shift,
    Supplier,
    SupplierInvoice,
    SupplierPayment,
)
from kenpos.core.exceptions import RecordNotFoundError
from kenpos.core.interfaces.storage import Collection, IPersistenceStore

T = TypeVar("T", bound=BaseModel)


class Repository(Generic[T]):
    """Entity-typed view of one collection."""

    def __init__(self, store: IPersistenceStore, collection: Collection, model: type[T]):
        self.store = store
        self.collection = collection
        self.model = model

    async def get(self, record_id: str) -> T | None:
        record = await self.store.get(self.collection, record_id)
        return self.model.model_validate(record) if record is not None else None

    async def require(self, record_id: str) -> T:
        entity = await self.get(record_id)
        if entity is None:
            raise RecordNotFoundError(self.collection.value, record_id)
        return entity

    async def list(self) -> list[T]:
        return [self.model.model_validate(r) for r in await self.store.get_all(self.collection)]

    async def save(self, entity: T) -> T:
        await self.store.put(self.collection, entity.model_dump(mode="json"))
        return entity

    async def remove(self, record_id: str) -> bool:
        return await self.store.delete(self.collection, record_id)


@dataclass
class Repositories:
    """All repositories bound to one store (or one transaction scope)."""

    products: Repository[Product]
    customers: Repository[Customer]
    sales: Repository[Sale]
    order_queue: Repository[Sale]
    suppliers: Repository[Supplier]
    purchase_orders: Repository[PurchaseOrder]
    supplier_invoices: Repository[SupplierInvoice]
    supplier_payments: Repository[SupplierPayment]
    quotations: Repository[Quotation]
    audit_logs: Repository[AuditLog]
    shifts: Repository[Shift]
    carts: Repository[Cart]

    @classmethod
    def bind(cls, store: IPersistenceStore) -> "Repositories":
        return cls(
            products=Repository(store, Collection.PRODUCTS, Product),
            customers=Repository(store, Collection.CUSTOMERS, Customer),
            sales=Repository(store, Collection.SALES, Sale),
            order_queue=Repository(store, Collection.ORDER_QUEUE, Sale),
            suppliers=Repository(store, Collection.SUPPLIERS, Supplier),
            purchase_orders=Repository(store, Collection.PURCHASE_ORDERS, PurchaseOrder),
            supplier_invoices=Repository(store, Collection.SUPPLIER_INVOICES, SupplierInvoice),
            supplier_payments=Repository(store, Collection.SUPPLIER_PAYMENTS, SupplierPayment),
            quotations=Repository(store, Collection.QUOTATIONS, Quotation),
            audit_logs=Repository(store, Collection.AUDIT_LOGS, AuditLog),
            shifts=Repository(store, Collection.SHIFTS, Shift),
            carts=Repository(store, Collection.CARTS, Cart),
        )


# Entity model for every collection, used to validate backups
COLLECTION_MODELS: dict[Collection, type[BaseModel]] = {
    Collection.PRODUCTS: Product,
    Collection.CUSTOMERS: Customer,
    Collection.SALES: Sale,
    Collection.ORDER_QUEUE: Sale,
    Collection.SUPPLIERS: Supplier,
    Collection.PURCHASE_ORDERS: PurchaseOrder,
    Collection.SUPPLIER_INVOICES: SupplierInvoice,
    Collection.SUPPLIER_PAYMENTS: SupplierPayment,
    Collection.QUOTATIONS: Quotation,
    Collection.AUDIT_LOGS: AuditLog,
    Collection.SHIFTS: Shift,
    Collection.CARTS: Cart,
}
