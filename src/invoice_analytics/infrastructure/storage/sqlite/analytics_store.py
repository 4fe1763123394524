"""
SQLite implementation of the reporting queries.

Statements come from the query builder; this module only executes them and
maps rows to report entities. Driver errors surface as DatabaseError.
"""

from datetime import date, datetime
from typing import Any

import aiosqlite

from invoice_analytics.config import get_logger
from invoice_analytics.core.entities import (
    CashOutflowPoint,
    CategorySpend,
    DashboardStats,
    InvoiceListRow,
    InvoicePage,
    MonthlyTrend,
    VendorSpend,
)
from invoice_analytics.core.exceptions import DatabaseError
from invoice_analytics.core.interfaces import IAnalyticsStore
from invoice_analytics.core.services.formatting import round_money, to_date
from invoice_analytics.core.services.invoice_status import derive_status
from invoice_analytics.core.services.query_builder import (
    InvoiceListQuery,
    SQLStatement,
    cash_outflow_statement,
    category_spend_statement,
    dashboard_stats_statements,
    invoice_list_statements,
    invoice_trends_statement,
    top_vendors_statement,
)
from invoice_analytics.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)


async def _fetch_all(conn: aiosqlite.Connection, statement: SQLStatement) -> list[aiosqlite.Row]:
    cursor = await conn.execute(statement.text, statement.params)
    return list(await cursor.fetchall())


async def _fetch_one(conn: aiosqlite.Connection, statement: SQLStatement) -> aiosqlite.Row | None:
    cursor = await conn.execute(statement.text, statement.params)
    return await cursor.fetchone()


class SQLiteAnalyticsStore(IAnalyticsStore):
    """SQLite implementation of the reporting queries."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def get_dashboard_stats(self, year_start: date) -> DashboardStats:
        ytd_stmt, invoices_stmt, documents_stmt = dashboard_stats_statements(year_start)
        try:
            async with self._pool.snapshot() as conn:
                ytd = await _fetch_one(conn, ytd_stmt)
                invoices = await _fetch_one(conn, invoices_stmt)
                documents = await _fetch_one(conn, documents_stmt)
        except aiosqlite.Error as e:
            raise DatabaseError("get_dashboard_stats", str(e)) from e

        return DashboardStats(
            total_spend_ytd=round_money(ytd["total_spend"] if ytd else 0),
            total_invoices_processed=invoices["total"] if invoices else 0,
            documents_uploaded=documents["total"] if documents else 0,
            average_invoice_value=round_money(ytd["average_value"] if ytd else 0),
        )

    async def get_invoice_trends(self) -> list[MonthlyTrend]:
        try:
            async with self._pool.acquire() as conn:
                rows = await _fetch_all(conn, invoice_trends_statement())
        except aiosqlite.Error as e:
            raise DatabaseError("get_invoice_trends", str(e)) from e

        return [
            MonthlyTrend(
                month=row["month"],
                invoice_count=row["invoice_count"],
                total_spend=round_money(row["total_spend"]),
            )
            for row in rows
            if row["month"]
        ]

    async def get_top_vendors(self, limit: int = 10) -> list[VendorSpend]:
        try:
            async with self._pool.acquire() as conn:
                rows = await _fetch_all(conn, top_vendors_statement(limit))
        except aiosqlite.Error as e:
            raise DatabaseError("get_top_vendors", str(e)) from e

        return [
            VendorSpend(
                vendor_id=row["vendor_id"],
                vendor_name=row["vendor_name"],
                total_spend=round_money(row["total_spend"]),
            )
            for row in rows
        ]

    async def get_category_spend(self) -> list[CategorySpend]:
        try:
            async with self._pool.acquire() as conn:
                rows = await _fetch_all(conn, category_spend_statement())
        except aiosqlite.Error as e:
            raise DatabaseError("get_category_spend", str(e)) from e

        return [
            CategorySpend(category=row["category"], spend=round_money(row["spend"]))
            for row in rows
        ]

    async def get_cash_outflow(
        self,
        start: date,
        end: date | None = None,
        limit: int = 365,
    ) -> list[CashOutflowPoint]:
        statement = cash_outflow_statement(start, end, limit)
        try:
            async with self._pool.acquire() as conn:
                rows = await _fetch_all(conn, statement)
        except aiosqlite.Error as e:
            raise DatabaseError("get_cash_outflow", str(e)) from e

        points = []
        for row in rows:
            due = to_date(row["date"])
            if due is None:
                continue
            points.append(
                CashOutflowPoint(date=due, expected_outflow=round_money(row["expected_outflow"]))
            )
        return points

    async def list_invoices(self, query: InvoiceListQuery, now: datetime) -> InvoicePage:
        """
        One listing page.

        The data and count statements run in one read transaction so the
        total matches the rows it paginates.
        """
        data_stmt, count_stmt = invoice_list_statements(query)
        try:
            async with self._pool.snapshot() as conn:
                rows = await _fetch_all(conn, data_stmt)
                count_row = await _fetch_one(conn, count_stmt)
        except aiosqlite.Error as e:
            raise DatabaseError("list_invoices", str(e)) from e

        return InvoicePage(
            page=query.pagination.page,
            per_page=query.pagination.per_page,
            total=count_row["total"] if count_row else 0,
            rows=[self._row_to_listing(row, now) for row in rows],
        )

    @staticmethod
    def _row_to_listing(row: Any, now: datetime) -> InvoiceListRow:
        due = to_date(row["due_date"])
        return InvoiceListRow(
            document_id=row["document_id"],
            vendor=row["vendor_name"],
            date=to_date(row["invoice_date"]) or date(1970, 1, 1),
            invoice_number=row["invoice_number"],
            amount=round_money(row["total_amount"]),
            status=derive_status(row["document_status"], due, now),
        )
