"""Purchase order and supplier invoice endpoints."""

from fastapi import APIRouter, Depends, status

from kenpos.api.dependencies import (
    get_purchase_order_use_case,
    get_receive_purchase_order_use_case,
    get_supplier_invoice_use_case,
)
from kenpos.application.dto.requests import (
    AddPurchaseOrderItemRequest,
    CreatePurchaseOrderRequest,
    PurchaseOrderActionRequest,
    ReceivePurchaseOrderRequest,
    RecordSupplierPaymentRequest,
)
from kenpos.application.dto.responses import ErrorResponse, ReceivePurchaseOrderResponse
from kenpos.application.use_cases import (
    PurchaseOrderUseCase,
    ReceivePurchaseOrderUseCase,
    SupplierInvoiceUseCase,
)
from kenpos.core.entities import PurchaseOrder, SupplierInvoice

router = APIRouter(prefix="/api/purchase-orders", tags=["purchasing"])
invoices_router = APIRouter(prefix="/api/supplier-invoices", tags=["purchasing"])


@router.get("", response_model=list[PurchaseOrder])
async def list_purchase_orders(
    use_case: PurchaseOrderUseCase = Depends(get_purchase_order_use_case),
) -> list[PurchaseOrder]:
    return await use_case.list_orders()


@router.post(
    "",
    response_model=PurchaseOrder,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_purchase_order(
    request: CreatePurchaseOrderRequest,
    use_case: PurchaseOrderUseCase = Depends(get_purchase_order_use_case),
) -> PurchaseOrder:
    return await use_case.create(request)


@router.post(
    "/{po_id}/items",
    response_model=PurchaseOrder,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def add_purchase_order_item(
    po_id: str,
    request: AddPurchaseOrderItemRequest,
    use_case: PurchaseOrderUseCase = Depends(get_purchase_order_use_case),
) -> PurchaseOrder:
    """Add a line to a Draft order."""
    return await use_case.add_item(po_id, request)


@router.post(
    "/{po_id}/send",
    response_model=PurchaseOrder,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def send_purchase_order(
    po_id: str,
    request: PurchaseOrderActionRequest,
    use_case: PurchaseOrderUseCase = Depends(get_purchase_order_use_case),
) -> PurchaseOrder:
    return await use_case.send(po_id, request.user_id)


@router.post(
    "/{po_id}/cancel",
    response_model=PurchaseOrder,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def cancel_purchase_order(
    po_id: str,
    request: PurchaseOrderActionRequest,
    use_case: PurchaseOrderUseCase = Depends(get_purchase_order_use_case),
) -> PurchaseOrder:
    return await use_case.cancel(po_id, request.user_id)


@router.post(
    "/{po_id}/receive",
    response_model=ReceivePurchaseOrderResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def receive_purchase_order(
    po_id: str,
    request: ReceivePurchaseOrderRequest,
    use_case: ReceivePurchaseOrderUseCase = Depends(get_receive_purchase_order_use_case),
) -> ReceivePurchaseOrderResponse:
    """Receive goods, add stock and raise the supplier invoice."""
    result = await use_case.execute(po_id, request)
    return use_case.to_response(result)


@invoices_router.get("", response_model=list[SupplierInvoice])
async def list_supplier_invoices(
    supplier_id: str | None = None,
    use_case: SupplierInvoiceUseCase = Depends(get_supplier_invoice_use_case),
) -> list[SupplierInvoice]:
    return await use_case.list_invoices(supplier_id)


@invoices_router.post(
    "/{invoice_id}/payments",
    response_model=SupplierInvoice,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def record_supplier_payment(
    invoice_id: str,
    request: RecordSupplierPaymentRequest,
    use_case: SupplierInvoiceUseCase = Depends(get_supplier_invoice_use_case),
) -> SupplierInvoice:
    return await use_case.record_payment(invoice_id, request)
