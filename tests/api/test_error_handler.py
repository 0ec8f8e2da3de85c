"""Tests for exception to status mapping."""

import pytest

from kenpos.api.middleware.error_handler import HINT_MAP, status_for
from kenpos.core.exceptions import (
    BackupValidationError,
    CircuitBreakerOpenError,
    DatabaseError,
    InsufficientStockError,
    KenPOSError,
    NoActiveShiftError,
    OverpaymentError,
    RecordNotFoundError,
)


class TestStatusFor:
    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (RecordNotFoundError("products", "p1"), 404),
            (DatabaseError("put", "disk full"), 500),
            (NoActiveShiftError("cashier_1"), 409),
            (InsufficientStockError("p1", 5, 2), 409),
            (OverpaymentError("change exceeds cash tendered", 10, 0), 422),
            (BackupValidationError("bad"), 400),
            (CircuitBreakerOpenError("backoffice", 30), 503),
            (ValueError("x"), 400),
            (KenPOSError("unclassified"), 500),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_mapping(self, exc, expected):
        assert status_for(exc) == expected

    def test_backup_errors_have_hint(self):
        assert BackupValidationError("bad").code in HINT_MAP
