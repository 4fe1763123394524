"""
Domain exceptions for the invoice analytics service.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class InvoiceAnalyticsError(Exception):
    """Base exception for all service errors."""

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
            "error": self.message,
            "error_code": self.code,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(InvoiceAnalyticsError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class MigrationError(StorageError):
    """A schema migration could not be applied."""

    def __init__(self, version: str, reason: str):
        super().__init__(
            f"Migration {version} failed: {reason}",
            code="MIGRATION_FAILED",
            details={"version": version},
        )


class ReportQueryError(StorageError):
    """A reporting query failed; carries the fixed client-facing message."""

    def __init__(self, report: str, message: str):
        super().__init__(
            message,
            code="REPORT_QUERY_FAILED",
            details={"report": report},
        )


# LLM Exceptions
class LLMError(InvoiceAnalyticsError):
    """Base exception for LLM operations."""

    pass


class LLMUnavailableError(LLMError):
    """LLM provider is not available."""

    def __init__(self, provider: str, reason: str | None = None):
        super().__init__(
            f"LLM provider unavailable: {provider}" + (f" - {reason}" if reason else ""),
            code="LLM_UNAVAILABLE",
            details={"provider": provider, "reason": reason},
        )


class LLMTimeoutError(LLMError):
    """LLM request timed out."""

    def __init__(self, timeout: int, operation: str = "completion"):
        super().__init__(
            f"LLM {operation} timed out after {timeout} seconds",
            code="LLM_TIMEOUT",
            details={"timeout": timeout, "operation": operation},
        )


class LLMResponseError(LLMError):
    """LLM returned invalid or empty response."""

    def __init__(self, reason: str, response: str | None = None):
        super().__init__(
            f"Invalid LLM response: {reason}",
            code="LLM_RESPONSE_ERROR",
            details={"reason": reason, "response_preview": (response or "")[:200]},
        )


class ModelNotFoundError(LLMError):
    """Requested model not found."""

    def __init__(self, model: str, provider: str):
        super().__init__(
            f"Model '{model}' not found on {provider}",
            code="MODEL_NOT_FOUND",
            details={"model": model, "provider": provider},
        )


class CircuitBreakerOpenError(LLMError):
    """Circuit breaker is open due to repeated failures."""

    def __init__(self, provider: str, cooldown_remaining: int):
        super().__init__(
            f"Circuit breaker open for {provider}, retry in {cooldown_remaining}s",
            code="CIRCUIT_BREAKER_OPEN",
            details={"provider": provider, "cooldown_remaining": cooldown_remaining},
        )


# Validation Exceptions
class ValidationError(InvoiceAnalyticsError):
    """Input validation failed."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, details=details)


class InvalidParameterError(ValidationError):
    """A query-string parameter could not be interpreted."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            f"Invalid '{field}': {reason}",
            code="INVALID_PARAMETER",
            details={"field": field, "value": str(value)[:100] if value else None},
        )


class InvalidQueryError(ValidationError):
    """Chat question is missing, blank, or not a string."""

    def __init__(self) -> None:
        super().__init__("Missing or invalid 'query'.", code="INVALID_QUERY")


class UnsafeSQLError(ValidationError):
    """Generated SQL failed the read-only safety gate."""

    def __init__(self, reason: str, sql: str | None = None):
        super().__init__(
            "Generated SQL is not a valid SELECT query for safety.",
            code="UNSAFE_SQL",
            details={"reason": reason, "sql_preview": (sql or "")[:200]},
        )
        self.reason = reason


class ChatQueryError(InvoiceAnalyticsError):
    """Chat-with-data failed upstream (LLM call or SQL execution)."""

    def __init__(self, error: str, preview_chars: int = 150):
        super().__init__(
            f"Query Failed: {error[:preview_chars]}...",
            code="CHAT_QUERY_FAILED",
        )


class ConfigurationError(InvoiceAnalyticsError):
    """Configuration error."""

    pass


class IngestionError(InvoiceAnalyticsError):
    """Seed data could not be read or loaded."""

    pass
