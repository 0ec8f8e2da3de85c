"""
Error mapping for the HTTP surface.

Domain exceptions become an ``ErrorResponse`` body with a stable
``error_code`` the till UI switches on, a message, and a recovery hint for
the cashier. Status codes follow the exception family:

- missing records: 404
- rejected input: 400
- shift, cart, stock and lifecycle preconditions: 409
- payments that do not settle the amount due: 422
- unreachable sync endpoint: 503
- storage and configuration faults: 500
"""

import json
import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from kenpos.application.dto.responses import ErrorResponse
from kenpos.config import get_logger
from kenpos.core.exceptions import (
    ConfigurationError,
    KenPOSError,
    PaymentError,
    PreconditionError,
    RecordNotFoundError,
    StockError,
    StorageError,
    SyncError,
    ValidationError,
)

logger = get_logger(__name__)

# Resolved along the exception's MRO, so the most specific family wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    RecordNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PreconditionError: status.HTTP_409_CONFLICT,
    StockError: status.HTTP_409_CONFLICT,
    PaymentError: 422,
    SyncError: status.HTTP_503_SERVICE_UNAVAILABLE,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
    KeyError: status.HTTP_404_NOT_FOUND,
}

HINT_MAP: dict[str, str] = {
    "RECORD_NOT_FOUND": "Check the ID; list endpoints show available records.",
    "NO_ACTIVE_SHIFT": "Start a shift with POST /api/shifts/start first.",
    "SHIFT_ALREADY_ACTIVE": "End the current shift with POST /api/shifts/end first.",
    "EMPTY_CART": "Add items with POST /api/cart/{cashier_id}/items before checkout.",
    "DUPLICATE_CUSTOMER": "Look up the existing customer by phone instead.",
    "DUPLICATE_SUPPLIER": "A supplier with this name already exists.",
    "PROTECTED_RECORD": "This record is required by the system and cannot be changed.",
    "INVALID_STATE_TRANSITION": "Check the current status before retrying.",
    "OUT_OF_STOCK": "Receive stock against a purchase order first.",
    "INSUFFICIENT_STOCK": "Reduce the quantity or receive more stock.",
    "INSUFFICIENT_PAYMENT": "Tendered payments must cover the amount due.",
    "OVERPAYMENT": "Change is only given on cash; reduce the non-cash amount.",
    "INVALID_BACKUP": "The backup file is malformed; nothing was restored.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "SYNC_UNAVAILABLE": "The sync endpoint is offline. Queued sales are kept.",
    "CIRCUIT_BREAKER_OPEN": "Too many sync failures. Wait for cooldown before retrying.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicts with the current state.",
    422: "The request could not be processed. Check the input.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}


def status_for(exc: Exception) -> int:
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _hint(error_code: str, status_code: int) -> str:
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _render(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Render any exception as an ErrorResponse."""
    status_code = status_for(exc)
    if isinstance(exc, KenPOSError):
        error_code, message = exc.code, exc.message
        detail = json.dumps(exc.details, default=str) if exc.details else None
    else:
        error_code, message, detail = type(exc).__name__, str(exc), None

    if status_code >= 500:
        logger.error(
            "request_error",
            path=request.url.path,
            error_code=error_code,
            error=message,
            traceback=traceback.format_exc(),
        )
    else:
        logger.warning("request_rejected", path=request.url.path, error_code=error_code)

    return _render(
        status_code,
        ErrorResponse(
            error_code=error_code,
            message=message,
            hint=_hint(error_code, status_code),
            detail=detail,
            path=request.url.path,
        ),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Last line of defence for exceptions no handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


async def _domain_error(request: Request, exc: KenPOSError) -> JSONResponse:
    return build_error_response(request, exc)


async def _request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return _render(
        422,
        ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            hint=HINT_MAP["VALIDATION_ERROR"],
            detail="; ".join(problems),
            path=request.url.path,
        ),
    )


async def _http_error(request: Request, exc: HTTPException) -> JSONResponse:
    error_code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "HTTP_ERROR"
    return _render(
        exc.status_code,
        ErrorResponse(
            error_code=error_code,
            message=str(exc.detail or "An error occurred"),
            hint=_hint(error_code, exc.status_code),
            path=request.url.path,
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(KenPOSError, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(HTTPException, _http_error)
