"""Infrastructure layer implementations."""

from invoice_analytics.infrastructure import llm, storage

__all__ = ["storage", "llm"]
