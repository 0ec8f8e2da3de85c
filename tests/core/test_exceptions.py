"""Tests for domain exceptions."""

from kenpos.core.exceptions import (
    BackupValidationError,
    CircuitBreakerOpenError,
    DatabaseError,
    InsufficientPaymentError,
    InsufficientStockError,
    InvalidStateTransitionError,
    KenPOSError,
    NoActiveShiftError,
    OutOfStockError,
    PaymentError,
    PreconditionError,
    RecordNotFoundError,
    StockError,
    StorageError,
    SyncError,
    ValidationError,
)


class TestKenPOSError:
    def test_defaults(self):
        err = KenPOSError("boom")
        assert err.message == "boom"
        assert err.code == "KenPOSError"
        assert err.details == {}

    def test_to_dict(self):
        err = KenPOSError("boom", code="X", details={"a": 1})
        assert err.to_dict() == {"error": "X", "message": "boom", "details": {"a": 1}}


class TestHierarchy:
    def test_record_not_found(self):
        err = RecordNotFoundError("products", "prod_9")
        assert isinstance(err, StorageError)
        assert err.code == "RECORD_NOT_FOUND"
        assert err.details["record_id"] == "prod_9"

    def test_database_error(self):
        err = DatabaseError("transaction", "locked")
        assert isinstance(err, StorageError)
        assert "locked" in err.message

    def test_preconditions(self):
        assert isinstance(NoActiveShiftError("cashier_1"), PreconditionError)
        err = InvalidStateTransitionError("purchase order", "po_1", "Draft", "receive")
        assert isinstance(err, PreconditionError)
        assert err.code == "INVALID_STATE_TRANSITION"

    def test_stock_errors(self):
        assert isinstance(OutOfStockError("prod_1", "Flour"), StockError)
        err = InsufficientStockError("prod_1", 5, 2)
        assert isinstance(err, StockError)
        assert err.code == "INSUFFICIENT_STOCK"

    def test_payment_error(self):
        err = InsufficientPaymentError(100.0, 50.0)
        assert isinstance(err, PaymentError)
        assert err.code == "INSUFFICIENT_PAYMENT"

    def test_backup_validation_is_validation_error(self):
        err = BackupValidationError("bad", "products[0]")
        assert isinstance(err, ValidationError)
        assert err.code == "INVALID_BACKUP"
        assert err.details["field"] == "products[0]"

    def test_circuit_breaker_is_sync_error(self):
        assert isinstance(CircuitBreakerOpenError("http://x", 30), SyncError)
