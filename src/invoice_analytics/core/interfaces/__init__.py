"""Core interfaces (ports) for dependency injection."""

from invoice_analytics.core.interfaces.llm import (
    HealthStatus,
    ILLMProvider,
    LLMProvider,
    LLMResponse,
)
from invoice_analytics.core.interfaces.storage import (
    IAnalyticsStore,
    IIngestStore,
    IngestSummary,
    ISQLExecutor,
)

__all__ = [
    # LLM interfaces
    "ILLMProvider",
    "LLMProvider",
    "LLMResponse",
    "HealthStatus",
    # Storage interfaces
    "IAnalyticsStore",
    "ISQLExecutor",
    "IIngestStore",
    "IngestSummary",
]
