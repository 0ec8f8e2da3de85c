"""Application use cases."""

from kenpos.application.use_cases.backup_restore import BackupRestoreUseCase
from kenpos.application.use_cases.complete_sale import (
    CompleteSaleResult,
    CompleteSaleUseCase,
)
from kenpos.application.use_cases.end_shift import EndShiftUseCase
from kenpos.application.use_cases.manage_cart import CartUseCase
from kenpos.application.use_cases.purchase_orders import PurchaseOrderUseCase
from kenpos.application.use_cases.quotations import QuotationUseCase
from kenpos.application.use_cases.receive_purchase_order import (
    ReceivePurchaseOrderResult,
    ReceivePurchaseOrderUseCase,
)
from kenpos.application.use_cases.registry import RegistryUseCase
from kenpos.application.use_cases.shift_status import ShiftStatusUseCase
from kenpos.application.use_cases.start_shift import StartShiftUseCase
from kenpos.application.use_cases.supplier_invoices import SupplierInvoiceUseCase
from kenpos.application.use_cases.sync_offline_sales import (
    SyncOfflineSalesUseCase,
    SyncReport,
)

__all__ = [
    "BackupRestoreUseCase",
    "CartUseCase",
    "CompleteSaleResult",
    "CompleteSaleUseCase",
    "EndShiftUseCase",
    "PurchaseOrderUseCase",
    "QuotationUseCase",
    "ReceivePurchaseOrderResult",
    "ReceivePurchaseOrderUseCase",
    "RegistryUseCase",
    "ShiftStatusUseCase",
    "StartShiftUseCase",
    "SupplierInvoiceUseCase",
    "SyncOfflineSalesUseCase",
    "SyncReport",
]
