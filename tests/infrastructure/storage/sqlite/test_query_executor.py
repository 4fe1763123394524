"""Tests for read-only execution of generated SQL."""

import pytest

from invoice_analytics.core.exceptions import DatabaseError
from invoice_analytics.infrastructure.storage.sqlite import ConnectionPool, SQLiteQueryExecutor


async def _count(pool: ConnectionPool, table: str) -> int:
    async with pool.acquire() as conn:
        cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
        return (await cursor.fetchone())[0]


class TestSQLiteQueryExecutor:
    def test_requires_read_only_pool(self, temp_db_path):
        with pytest.raises(ValueError):
            SQLiteQueryExecutor(ConnectionPool(temp_db_path))

    async def test_returns_rows_as_dicts(self, seeded_pool, read_only_pool):
        executor = SQLiteQueryExecutor(read_only_pool)

        rows = await executor.execute_select(
            "SELECT invoice_number, total_amount FROM invoices ORDER BY invoice_number"
        )

        assert rows[0] == {"invoice_number": "INV-001", "total_amount": 100.0}
        assert len(rows) == 4

    async def test_empty_result(self, read_only_pool):
        executor = SQLiteQueryExecutor(read_only_pool)
        assert await executor.execute_select("SELECT * FROM vendors") == []

    @pytest.mark.parametrize(
        "sql",
        [
            "DELETE FROM vendors",
            "DROP TABLE invoices",
            "SELECT 1; DROP TABLE invoices",
        ],
    )
    async def test_writes_are_refused(self, seeded_pool, read_only_pool, sql):
        executor = SQLiteQueryExecutor(read_only_pool)

        with pytest.raises(DatabaseError):
            await executor.execute_select(sql)

        assert await _count(seeded_pool, "vendors") == 3
        assert await _count(seeded_pool, "invoices") == 4

    async def test_sql_error(self, read_only_pool):
        executor = SQLiteQueryExecutor(read_only_pool)
        with pytest.raises(DatabaseError) as exc_info:
            await executor.execute_select("SELECT nope FROM invoices")
        assert "no such column" in exc_info.value.message
