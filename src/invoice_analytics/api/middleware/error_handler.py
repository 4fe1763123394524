"""
Error handling middleware.

Renders every failure as JSON:
- error: human-readable message (the client-facing contract)
- error_code: machine-readable identifier
- path: request path that triggered the error
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from invoice_analytics.application.dto.responses import ErrorResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import (
    ChatQueryError,
    ConfigurationError,
    InvoiceAnalyticsError,
    LLMError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal Server Error"

# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ChatQueryError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LLMError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to the standard JSON error body."""
    status_code = status_for(exc)

    if isinstance(exc, InvoiceAnalyticsError):
        error_code = exc.code
        message = exc.message
    else:
        # Never leak raw exception text for unexpected failures
        error_code = exc.__class__.__name__
        message = GENERIC_ERROR_MESSAGE

    request_id = getattr(request.state, "request_id", None)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_failed",
        request_id=request_id,
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        details=exc.details if isinstance(exc, InvoiceAnalyticsError) else None,
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    body = ErrorResponse(error=message, error_code=error_code, path=request.url.path)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Last line of defence for exceptions that escaped the registered
    exception handlers.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""

    @app.exception_handler(InvoiceAnalyticsError)
    async def domain_exception_handler(
        request: Request,
        exc: InvoiceAnalyticsError,
    ) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed bodies and parameters are client errors (400)."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        logger.warning("request_validation_failed", path=request.url.path, errors=errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error="Invalid request: " + "; ".join(errors) if errors else "Invalid request",
                error_code="VALIDATION_ERROR",
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions (404, 405, ...) with the standard body."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=str(exc.detail) if exc.detail else "An error occurred",
                error_code=_error_code_for_status(exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _error_code_for_status(status_code: int) -> str:
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    return "HTTP_ERROR"
