"""Audit log entity."""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AuditAction(str, Enum):
    """Actions recorded in the audit trail."""

    SALE_COMPLETE = "SALE_COMPLETE"
    SHIFT_START = "SHIFT_START"
    SHIFT_END = "SHIFT_END"
    ADD_PRODUCT = "ADD_PRODUCT"
    ADD_CUSTOMER = "ADD_CUSTOMER"
    DELETE_CUSTOMER = "DELETE_CUSTOMER"
    ADD_SUPPLIER = "ADD_SUPPLIER"
    ADD_PO = "ADD_PO"
    SEND_PO = "SEND_PO"
    CANCEL_PO = "CANCEL_PO"
    UPDATE_PO = "UPDATE_PO"
    RECEIVE_PO = "RECEIVE_PO"
    RECORD_SUPPLIER_PAYMENT = "RECORD_SUPPLIER_PAYMENT"
    ADD_QUOTATION = "ADD_QUOTATION"
    CONVERT_QUOTE = "CONVERT_QUOTE"
    SYNC_SALES = "SYNC_SALES"
    BACKUP_DATA = "BACKUP_DATA"
    RESTORE_DATA = "RESTORE_DATA"


class AuditLog(BaseModel):
    """Append-only record of a state-changing operation."""

    id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    user_id: str
    action: AuditAction
    details: dict[str, Any] = Field(default_factory=dict)
