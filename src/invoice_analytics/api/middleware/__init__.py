"""API middleware."""

from invoice_analytics.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    setup_exception_handlers,
)
from invoice_analytics.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
