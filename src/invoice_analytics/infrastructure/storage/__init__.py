"""Storage infrastructure implementations."""

from invoice_analytics.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAnalyticsStore,
    SQLiteIngestStore,
    SQLiteQueryExecutor,
    run_migrations,
)

__all__ = [
    "ConnectionPool",
    "SQLiteAnalyticsStore",
    "SQLiteIngestStore",
    "SQLiteQueryExecutor",
    "run_migrations",
]
