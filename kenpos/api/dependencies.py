"""
Dependency injection container for FastAPI.

Provides use case instances to route handlers. Tests override
``get_store`` (and ``get_sync``) to run against an in-memory store.
"""

from fastapi import Depends

from kenpos.application.connectivity import ConnectivityState, get_connectivity
from kenpos.application.use_cases import (
    BackupRestoreUseCase,
    CartUseCase,
    CompleteSaleUseCase,
    EndShiftUseCase,
    PurchaseOrderUseCase,
    QuotationUseCase,
    ReceivePurchaseOrderUseCase,
    RegistryUseCase,
    ShiftStatusUseCase,
    StartShiftUseCase,
    SupplierInvoiceUseCase,
    SyncOfflineSalesUseCase,
)
from kenpos.core.interfaces import IPersistenceStore, IRemoteSyncEndpoint
from kenpos.infrastructure.storage.sqlite import get_persistence_store
from kenpos.infrastructure.sync import get_sync_endpoint


async def get_store() -> IPersistenceStore:
    """Get the persistence store."""
    return await get_persistence_store()


def get_sync() -> IRemoteSyncEndpoint:
    """Get the remote sync endpoint."""
    return get_sync_endpoint()


def get_connectivity_state() -> ConnectivityState:
    return get_connectivity()


# Use case dependencies
def get_cart_use_case(store: IPersistenceStore = Depends(get_store)) -> CartUseCase:
    return CartUseCase(store=store)


def get_complete_sale_use_case(
    store: IPersistenceStore = Depends(get_store),
    connectivity: ConnectivityState = Depends(get_connectivity_state),
) -> CompleteSaleUseCase:
    return CompleteSaleUseCase(store=store, connectivity=connectivity)


def get_start_shift_use_case(store: IPersistenceStore = Depends(get_store)) -> StartShiftUseCase:
    return StartShiftUseCase(store=store)


def get_end_shift_use_case(store: IPersistenceStore = Depends(get_store)) -> EndShiftUseCase:
    return EndShiftUseCase(store=store)


def get_shift_status_use_case(
    store: IPersistenceStore = Depends(get_store),
) -> ShiftStatusUseCase:
    return ShiftStatusUseCase(store=store)


def get_purchase_order_use_case(
    store: IPersistenceStore = Depends(get_store),
) -> PurchaseOrderUseCase:
    return PurchaseOrderUseCase(store=store)


def get_receive_purchase_order_use_case(
    store: IPersistenceStore = Depends(get_store),
) -> ReceivePurchaseOrderUseCase:
    return ReceivePurchaseOrderUseCase(store=store)


def get_supplier_invoice_use_case(
    store: IPersistenceStore = Depends(get_store),
) -> SupplierInvoiceUseCase:
    return SupplierInvoiceUseCase(store=store)


def get_registry_use_case(store: IPersistenceStore = Depends(get_store)) -> RegistryUseCase:
    return RegistryUseCase(store=store)


def get_quotation_use_case(store: IPersistenceStore = Depends(get_store)) -> QuotationUseCase:
    return QuotationUseCase(store=store)


def get_sync_use_case(
    store: IPersistenceStore = Depends(get_store),
    endpoint: IRemoteSyncEndpoint = Depends(get_sync),
) -> SyncOfflineSalesUseCase:
    return SyncOfflineSalesUseCase(store=store, endpoint=endpoint)


def get_backup_restore_use_case(
    store: IPersistenceStore = Depends(get_store),
) -> BackupRestoreUseCase:
    return BackupRestoreUseCase(store=store)
