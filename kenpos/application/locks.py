"""
Per-aggregate locks.

Operations that read-modify-write a product's stock, a shift's sales list
or a purchase order's receipt state hold the lock of each aggregate they
touch for their whole unit of work.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager


def product_key(product_id: str) -> str:
    return f"product:{product_id}"


def shift_key(user_id: str) -> str:
    return f"shift:{user_id}"


def customer_key(customer_id: str) -> str:
    return f"customer:{customer_id}"


def purchase_order_key(po_id: str) -> str:
    return f"po:{po_id}"


def invoice_key(invoice_id: str) -> str:
    return f"invoice:{invoice_id}"


def cart_key(cashier_id: str) -> str:
    return f"cart:{cashier_id}"


class AggregateLocks:
    """Registry of asyncio locks keyed by aggregate."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        """Acquire all keys in sorted order (deadlock free), release in reverse."""
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self._lock_for(key))
            yield


# Global lock registry
_locks: AggregateLocks | None = None


def get_aggregate_locks() -> AggregateLocks:
    global _locks
    if _locks is None:
        _locks = AggregateLocks()
    return _locks


def reset_aggregate_locks() -> None:
    """Drop all locks (for testing)."""
    global _locks
    _locks = None
