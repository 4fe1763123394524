"""Tests for SQLiteAnalyticsStore against a seeded database."""

from datetime import UTC, date, datetime, timedelta

import pytest

from invoice_analytics.core.exceptions import DatabaseError
from invoice_analytics.core.services.ingestion import transform_records
from invoice_analytics.core.services.query_builder import build_invoice_list_query
from invoice_analytics.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAnalyticsStore,
    SQLiteIngestStore,
)

NOW = datetime.now(UTC)
TODAY = NOW.date()
YEAR_START = date(TODAY.year, 1, 1)


@pytest.fixture
def store(seeded_pool: ConnectionPool) -> SQLiteAnalyticsStore:
    return SQLiteAnalyticsStore(seeded_pool)


class TestDashboardStats:
    async def test_year_to_date_figures(self, store: SQLiteAnalyticsStore):
        stats = await store.get_dashboard_stats(YEAR_START)

        assert stats.total_spend_ytd == 1100.25
        assert stats.average_invoice_value == 550.13
        assert stats.total_invoices_processed == 4
        assert stats.documents_uploaded == 4

    async def test_empty_database(self, pool: ConnectionPool):
        stats = await SQLiteAnalyticsStore(pool).get_dashboard_stats(YEAR_START)
        assert stats.total_spend_ytd == 0.0
        assert stats.average_invoice_value == 0.0
        assert stats.total_invoices_processed == 0


class TestTrendsAndRankings:
    async def test_invoice_trends_oldest_first(self, store: SQLiteAnalyticsStore):
        trends = await store.get_invoice_trends()

        assert [(t.month, t.invoice_count, t.total_spend) for t in trends] == [
            (f"{TODAY.year - 1}-06", 1, 300.0),
            (f"{TODAY.year - 1}-12", 1, 250.5),
            (f"{TODAY.year}-01", 2, 1100.25),
        ]

    async def test_top_vendors(self, store: SQLiteAnalyticsStore):
        vendors = await store.get_top_vendors(10)
        assert [(v.vendor_name, v.total_spend) for v in vendors] == [
            ("Acme GmbH", 1100.25),
            ("Gamma Ltd", 300.0),
            ("Beta Supplies", 250.5),
        ]

    async def test_top_vendors_limit(self, store: SQLiteAnalyticsStore):
        assert len(await store.get_top_vendors(2)) == 2

    async def test_equal_spend_breaks_ties_by_vendor_id(self, pool, record_factory):
        records = [
            record_factory("a", "Zeta", "Z-1", date(2024, 1, 1), 50),
            record_factory("b", "Alpha", "A-1", date(2024, 1, 1), 50),
            record_factory("c", "Mid", "M-1", date(2024, 1, 1), 50),
        ]
        bundles, _ = transform_records(records)
        await SQLiteIngestStore(pool).load(bundles)

        vendors = await SQLiteAnalyticsStore(pool).get_top_vendors(10)

        ids = [v.vendor_id for v in vendors]
        assert ids == sorted(ids)

    async def test_category_spend(self, store: SQLiteAnalyticsStore):
        categories = await store.get_category_spend()
        assert [(c.category, c.spend) for c in categories] == [
            ("Unknown", 1000.25),
            ("4400", 300.0),
            ("9", 250.5),
        ]


class TestCashOutflow:
    async def test_default_window_starts_today(self, store: SQLiteAnalyticsStore):
        points = await store.get_cash_outflow(TODAY)

        # doc-1 full total plus doc-4 discounted total on the same due date
        assert [(p.date, p.expected_outflow) for p in points] == [
            (TODAY + timedelta(days=10), 390.0),
        ]

    async def test_explicit_range(self, store: SQLiteAnalyticsStore):
        points = await store.get_cash_outflow(TODAY - timedelta(days=5), TODAY)
        assert [(p.date, p.expected_outflow) for p in points] == [
            (TODAY - timedelta(days=5), 250.5),
            (TODAY - timedelta(days=3), 1000.25),
        ]

    async def test_limit(self, store: SQLiteAnalyticsStore):
        points = await store.get_cash_outflow(TODAY - timedelta(days=30), limit=1)
        assert len(points) == 1


class TestListInvoices:
    async def test_default_order_and_status(self, store: SQLiteAnalyticsStore):
        page = await store.list_invoices(build_invoice_list_query(), NOW)

        assert page.total == 4
        assert [(r.document_id, r.status) for r in page.rows] == [
            ("doc-1", "Due"),
            ("doc-3", "Overdue"),
            ("doc-2", "Paid"),
            ("doc-4", "processing"),
        ]

    async def test_sort_by_amount_ascending(self, store: SQLiteAnalyticsStore):
        query = build_invoice_list_query(sort_by="amount", order="asc")
        page = await store.list_invoices(query, NOW)
        assert [r.amount for r in page.rows] == [100.0, 250.5, 300.0, 1000.25]

    async def test_search_is_case_insensitive(self, store: SQLiteAnalyticsStore):
        page = await store.list_invoices(build_invoice_list_query(search="ACME"), NOW)
        assert page.total == 2
        assert {r.vendor for r in page.rows} == {"Acme GmbH"}

        page = await store.list_invoices(build_invoice_list_query(search="inv-004"), NOW)
        assert [r.document_id for r in page.rows] == ["doc-4"]

    async def test_pages_are_disjoint(self, store: SQLiteAnalyticsStore):
        first = await store.list_invoices(build_invoice_list_query(page="1", per_page="2"), NOW)
        second = await store.list_invoices(build_invoice_list_query(page="2", per_page="2"), NOW)
        third = await store.list_invoices(build_invoice_list_query(page="3", per_page="2"), NOW)

        first_ids = {r.document_id for r in first.rows}
        second_ids = {r.document_id for r in second.rows}
        assert len(first_ids) == len(second_ids) == 2
        assert first_ids.isdisjoint(second_ids)
        assert third.rows == []
        assert third.total == 4
        assert first.total_pages == 2


class TestRounding:
    async def test_half_cent_rounds_up(self, pool, record_factory):
        record = record_factory("r-1", "Round Co", "R-1", YEAR_START, 1000.005)
        bundles, _ = transform_records([record])
        await SQLiteIngestStore(pool).load(bundles)
        store = SQLiteAnalyticsStore(pool)

        stats = await store.get_dashboard_stats(YEAR_START)
        vendors = await store.get_top_vendors()

        assert stats.total_spend_ytd == 1000.01
        assert vendors[0].total_spend == 1000.01


class TestErrors:
    async def test_driver_error_becomes_database_error(self, pool: ConnectionPool):
        async with pool.transaction() as conn:
            await conn.execute("DROP TABLE line_items")

        with pytest.raises(DatabaseError) as exc_info:
            await SQLiteAnalyticsStore(pool).get_category_spend()
        assert exc_info.value.details["operation"] == "get_category_spend"
