"""
Domain exceptions for the KenPOS core.

Precondition failures are raised before any mutation takes place. Clamping
policies (discount, points, over-receipt) never raise.
"""

from typing import Any


class KenPOSError(Exception):
    """Base exception for all KenPOS errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(KenPOSError):
    """Base exception for storage operations."""

    pass


class RecordNotFoundError(StorageError):
    """Record not found in a collection."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(
            f"{collection} record not found: {record_id}",
            code="RECORD_NOT_FOUND",
            details={"collection": collection, "record_id": record_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Precondition Exceptions
class PreconditionError(KenPOSError):
    """Operation is not allowed in the current state."""

    pass


class NoActiveShiftError(PreconditionError):
    """User has no open shift."""

    def __init__(self, user_id: str):
        super().__init__(
            f"No active shift for user: {user_id}",
            code="NO_ACTIVE_SHIFT",
            details={"user_id": user_id},
        )


class ShiftAlreadyActiveError(PreconditionError):
    """User already has an open shift."""

    def __init__(self, user_id: str, shift_id: str):
        super().__init__(
            f"User {user_id} already has an active shift: {shift_id}",
            code="SHIFT_ALREADY_ACTIVE",
            details={"user_id": user_id, "shift_id": shift_id},
        )


class EmptyCartError(PreconditionError):
    """Sale attempted with an empty cart."""

    def __init__(self, cashier_id: str):
        super().__init__(
            f"Cart is empty for cashier: {cashier_id}",
            code="EMPTY_CART",
            details={"cashier_id": cashier_id},
        )


class DuplicateCustomerError(PreconditionError):
    """Customer with same phone number already exists."""

    def __init__(self, phone: str, existing_id: str):
        super().__init__(
            f"A customer with phone {phone} already exists",
            code="DUPLICATE_CUSTOMER",
            details={"phone": phone, "existing_id": existing_id},
        )


class DuplicateSupplierError(PreconditionError):
    """Supplier with same name already exists."""

    def __init__(self, name: str, existing_id: str):
        super().__init__(
            f"A supplier named '{name}' already exists",
            code="DUPLICATE_SUPPLIER",
            details={"name": name, "existing_id": existing_id},
        )


class ProtectedRecordError(PreconditionError):
    """Record cannot be modified or removed."""

    def __init__(self, collection: str, record_id: str, reason: str):
        super().__init__(
            f"Cannot modify {collection} record {record_id}: {reason}",
            code="PROTECTED_RECORD",
            details={"collection": collection, "record_id": record_id, "reason": reason},
        )


class InvalidStateTransitionError(PreconditionError):
    """Requested lifecycle transition is not allowed."""

    def __init__(self, entity: str, entity_id: str, current: str, requested: str):
        super().__init__(
            f"Cannot {requested} {entity} {entity_id} in status '{current}'",
            code="INVALID_STATE_TRANSITION",
            details={
                "entity": entity,
                "entity_id": entity_id,
                "current": current,
                "requested": requested,
            },
        )


# Stock Exceptions
class StockError(KenPOSError):
    """Base exception for stock level violations."""

    pass


class OutOfStockError(StockError):
    """Inventory product has no stock left."""

    def __init__(self, product_id: str, name: str):
        super().__init__(
            f"{name} is out of stock",
            code="OUT_OF_STOCK",
            details={"product_id": product_id, "name": name},
        )


class InsufficientStockError(StockError):
    """Requested quantity exceeds available stock."""

    def __init__(self, product_id: str, requested: float, available: float):
        super().__init__(
            f"Insufficient stock for {product_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "product_id": product_id,
                "requested": requested,
                "available": available,
            },
        )


# Payment Exceptions
class PaymentError(KenPOSError):
    """Base exception for payment problems."""

    pass


class InsufficientPaymentError(PaymentError):
    """Tendered amount does not cover the amount due."""

    def __init__(self, amount_due: float, tendered: float):
        super().__init__(
            f"Payment of {tendered:.2f} does not cover amount due {amount_due:.2f}",
            code="INSUFFICIENT_PAYMENT",
            details={"amount_due": amount_due, "tendered": tendered},
        )


class OverpaymentError(PaymentError):
    """Payment exceeds what can be accepted or returned as change."""

    def __init__(self, reason: str, amount: float, limit: float):
        super().__init__(
            f"Overpayment: {reason} ({amount:.2f} > {limit:.2f})",
            code="OVERPAYMENT",
            details={"reason": reason, "amount": amount, "limit": limit},
        )


# Validation Exceptions
class ValidationError(KenPOSError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class BackupValidationError(ValidationError):
    """Backup payload is malformed; nothing was written."""

    def __init__(self, message: str, location: str = "payload"):
        super().__init__(field=location, message=message)
        self.code = "INVALID_BACKUP"


# Sync Exceptions
class SyncError(KenPOSError):
    """Base exception for remote sync operations."""

    pass


class SyncUnavailableError(SyncError):
    """Remote endpoint rejected or could not be reached."""

    def __init__(self, endpoint: str, reason: str | None = None):
        super().__init__(
            f"Sync endpoint unavailable: {endpoint}" + (f" - {reason}" if reason else ""),
            code="SYNC_UNAVAILABLE",
            details={"endpoint": endpoint, "reason": reason},
        )


class CircuitBreakerOpenError(SyncError):
    """Circuit breaker is open, refusing calls to the endpoint."""

    def __init__(self, endpoint: str, retry_after: float):
        super().__init__(
            f"Circuit breaker open for {endpoint}, retry after {retry_after:.0f}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"endpoint": endpoint, "retry_after": retry_after},
        )


class ConfigurationError(KenPOSError):
    """Configuration error."""

    pass
