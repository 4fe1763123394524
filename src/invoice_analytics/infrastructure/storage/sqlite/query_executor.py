"""
Read-only execution of generated SQL.

Backed by a ConnectionPool opened with read_only=True, so even a statement
that slipped past the syntactic gate cannot write.
"""

import sqlite3
from typing import Any

import aiosqlite

from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import DatabaseError
from invoice_analytics.core.interfaces import ISQLExecutor
from invoice_analytics.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


class SQLiteQueryExecutor(ISQLExecutor):
    """Runs vetted SELECT statements and returns rows as plain dicts."""

    def __init__(self, pool: ConnectionPool):
        if not pool.read_only:
            raise ValueError("SQLiteQueryExecutor requires a read-only connection pool")
        self._pool = pool

    async def execute_select(self, sql: str) -> list[dict[str, Any]]:
        try:
            async with self._pool.acquire() as conn:
                cursor = await conn.execute(sql)
                columns = [col[0] for col in cursor.description or ()]
                rows = await cursor.fetchall()
        except (aiosqlite.Error, sqlite3.Warning) as e:
            raise DatabaseError("execute_select", str(e)) from e

        logger.debug("select_executed", rows=len(rows), columns=len(columns))
        return [dict(zip(columns, tuple(row), strict=False)) for row in rows]
