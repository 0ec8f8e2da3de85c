"""Abstract interface for record persistence."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """Named record collections."""

    PRODUCTS = "products"
    CUSTOMERS = "customers"
    SALES = "sales"
    SUPPLIERS = "suppliers"
    PURCHASE_ORDERS = "purchase_orders"
    SUPPLIER_INVOICES = "supplier_invoices"
    SUPPLIER_PAYMENTS = "supplier_payments"
    QUOTATIONS = "quotations"
    AUDIT_LOGS = "audit_logs"
    SHIFTS = "shifts"
    CARTS = "carts"
    # Sales completed while offline, drained by the sync coordinator
    ORDER_QUEUE = "order_queue"


def collection_name(collection: Collection | str) -> str:
    return collection.value if isinstance(collection, Collection) else str(collection)


class IPersistenceStore(ABC):
    """Interface for keyed record persistence.

    Records are JSON-compatible dicts carrying a string ``id``. ``put`` is an
    upsert, so writing the same record twice is idempotent.
    """

    @abstractmethod
    async def get(self, collection: Collection | str, record_id: str) -> dict[str, Any] | None:
        """Get a record by id."""
        pass

    @abstractmethod
    async def get_all(self, collection: Collection | str) -> list[dict[str, Any]]:
        """Get every record in a collection, in insertion order."""
        pass

    @abstractmethod
    async def put(self, collection: Collection | str, record: dict[str, Any]) -> None:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def delete(self, collection: Collection | str, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager["IPersistenceStore"]:
        """Unit of work.

        Yields a store whose writes are committed together when the block
        exits normally and discarded entirely if it raises.
        """
        pass
