"""SQLite storage implementations."""

from invoice_analytics.infrastructure.storage.sqlite.analytics_store import SQLiteAnalyticsStore
from invoice_analytics.infrastructure.storage.sqlite.connection import ConnectionPool
from invoice_analytics.infrastructure.storage.sqlite.ingest_store import SQLiteIngestStore
from invoice_analytics.infrastructure.storage.sqlite.migrations import (
    initialize_database,
    run_migrations,
)
from invoice_analytics.infrastructure.storage.sqlite.query_executor import SQLiteQueryExecutor

# Type aliases for convenience
AnalyticsStore = SQLiteAnalyticsStore
IngestStore = SQLiteIngestStore
QueryExecutor = SQLiteQueryExecutor

__all__ = [
    # Connection
    "ConnectionPool",
    # Migrations
    "initialize_database",
    "run_migrations",
    # Store classes
    "SQLiteAnalyticsStore",
    "SQLiteIngestStore",
    "SQLiteQueryExecutor",
    # Type aliases
    "AnalyticsStore",
    "IngestStore",
    "QueryExecutor",
]
