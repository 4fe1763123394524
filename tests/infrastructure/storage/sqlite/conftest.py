"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import pytest

from invoice_analytics.core.services.ingestion import transform_records
from invoice_analytics.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteIngestStore,
    initialize_database,
)


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Database with the full schema and no rows."""
    await initialize_database(temp_db_path, create_backup_before=False)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    pool = ConnectionPool(migrated_db, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
async def read_only_pool(
    pool: ConnectionPool,
    migrated_db: Path,
) -> AsyncGenerator[ConnectionPool, None]:
    ro_pool = ConnectionPool(migrated_db, pool_size=1, read_only=True)
    await ro_pool.initialize()
    yield ro_pool
    await ro_pool.close()


@pytest.fixture
async def seeded_pool(
    pool: ConnectionPool,
    sample_records: list[dict[str, Any]],
) -> ConnectionPool:
    """Read-write pool over a database loaded with sample_records."""
    bundles, _ = transform_records(sample_records)
    await SQLiteIngestStore(pool).load(bundles)
    return pool
