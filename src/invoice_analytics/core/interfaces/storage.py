"""
Abstract interfaces for storage providers.

Defines contracts for the reporting store, the read-only SQL executor used by
chat-with-data, and the ingestion store.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from invoice_analytics.core.entities.report import (
    CashOutflowPoint,
    CategorySpend,
    DashboardStats,
    InvoicePage,
    MonthlyTrend,
    VendorSpend,
)


class IAnalyticsStore(ABC):
    """
    Abstract interface for the reporting queries.

    Every method returns rows already rounded and typed for the API layer.
    """

    @abstractmethod
    async def get_dashboard_stats(self, year_start: date) -> DashboardStats:
        """Year-to-date spend figures plus overall counts."""
        pass

    @abstractmethod
    async def get_invoice_trends(self) -> list[MonthlyTrend]:
        """Invoice count and spend per calendar month, ascending."""
        pass

    @abstractmethod
    async def get_top_vendors(self, limit: int = 10) -> list[VendorSpend]:
        """Vendors ranked by total spend."""
        pass

    @abstractmethod
    async def get_category_spend(self) -> list[CategorySpend]:
        """Line-item spend grouped by bookkeeping category."""
        pass

    @abstractmethod
    async def get_cash_outflow(
        self,
        start: date,
        end: date | None = None,
        limit: int = 365,
    ) -> list[CashOutflowPoint]:
        """Expected outflow per due date within the given range."""
        pass

    @abstractmethod
    async def list_invoices(self, query: Any, now: datetime) -> InvoicePage:
        """
        One page of the invoice listing.

        Args:
            query: InvoiceListQuery built from request parameters
            now: Reference time for status derivation
        """
        pass


class ISQLExecutor(ABC):
    """Executes already-vetted SELECT statements on a read-only connection."""

    @abstractmethod
    async def execute_select(self, sql: str) -> list[dict[str, Any]]:
        """Run the statement and return rows as column-name dictionaries."""
        pass


@dataclass
class IngestSummary:
    """Counts written by one ingestion run."""

    documents: int = 0
    vendors: int = 0
    customers: int = 0
    invoices: int = 0
    line_items: int = 0
    payment_details: int = 0
    skipped: int = 0


class IIngestStore(ABC):
    """Writes transformed records to the invoice schema."""

    @abstractmethod
    async def load(self, bundles: list[Any], reset: bool = False) -> IngestSummary:
        """
        Persist ingestion bundles in a single transaction.

        Args:
            bundles: IngestBundle instances
            reset: Clear existing invoice data first
        """
        pass
