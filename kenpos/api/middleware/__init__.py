"""API middleware."""

from kenpos.api.middleware.error_handler import ErrorHandlerMiddleware
from kenpos.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
