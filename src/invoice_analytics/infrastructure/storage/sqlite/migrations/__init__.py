"""Schema migrations for the invoice database."""

from invoice_analytics.infrastructure.storage.sqlite.migrations.migrator import (
    INVOICE_TABLES,
    REQUIRED_TABLES,
    IntegrityCheck,
    MigrationInfo,
    MigrationResult,
    Migrator,
    create_backup,
    discover_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    restore_backup,
    run_migrations,
    verify_schema_integrity,
)

__all__ = [
    "INVOICE_TABLES",
    "REQUIRED_TABLES",
    "IntegrityCheck",
    "MigrationInfo",
    "MigrationResult",
    "Migrator",
    "create_backup",
    "discover_migrations",
    "get_current_version",
    "get_migration_status",
    "initialize_database",
    "restore_backup",
    "run_migrations",
    "verify_schema_integrity",
]
