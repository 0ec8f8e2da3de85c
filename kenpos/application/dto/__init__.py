"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from kenpos.application.dto.requests import (
    AddPurchaseOrderItemRequest,
    AddToCartRequest,
    CompleteSaleRequest,
    ConnectivityRequest,
    ConvertQuotationRequest,
    CreatePurchaseOrderRequest,
    CreateQuotationRequest,
    EndShiftRequest,
    PaymentRequest,
    PurchaseOrderActionRequest,
    PurchaseOrderLineRequest,
    QuotationLineRequest,
    ReceivePurchaseOrderRequest,
    RecordSupplierPaymentRequest,
    RegisterCustomerRequest,
    RegisterProductRequest,
    RegisterSupplierRequest,
    SetCartCustomerRequest,
    StartShiftRequest,
    UpdateCartItemRequest,
)
from kenpos.application.dto.responses import (
    CartResponse,
    CartTotalsResponse,
    CompleteSaleResponse,
    ErrorResponse,
    HealthResponse,
    ReceivePurchaseOrderResponse,
    RestoreResponse,
    ShiftReportResponse,
    ShiftStatusResponse,
    SyncResponse,
    SyncStatusResponse,
)

__all__ = [
    # Requests
    "AddPurchaseOrderItemRequest",
    "AddToCartRequest",
    "CompleteSaleRequest",
    "ConnectivityRequest",
    "ConvertQuotationRequest",
    "CreatePurchaseOrderRequest",
    "CreateQuotationRequest",
    "EndShiftRequest",
    "PaymentRequest",
    "PurchaseOrderActionRequest",
    "PurchaseOrderLineRequest",
    "QuotationLineRequest",
    "ReceivePurchaseOrderRequest",
    "RecordSupplierPaymentRequest",
    "RegisterCustomerRequest",
    "RegisterProductRequest",
    "RegisterSupplierRequest",
    "SetCartCustomerRequest",
    "StartShiftRequest",
    "UpdateCartItemRequest",
    # Responses
    "CartResponse",
    "CartTotalsResponse",
    "CompleteSaleResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReceivePurchaseOrderResponse",
    "RestoreResponse",
    "ShiftReportResponse",
    "ShiftStatusResponse",
    "SyncResponse",
    "SyncStatusResponse",
]
