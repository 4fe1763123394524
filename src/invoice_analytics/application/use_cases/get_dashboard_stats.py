"""
Get Dashboard Stats Use Case.

Year-to-date spend, average invoice value, and overall counts.
"""

from collections.abc import Callable
from datetime import date, datetime

from invoice_analytics.application.dto.responses import StatsResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore
from invoice_analytics.core.services.formatting import utc_now

logger = get_logger(__name__)

ERROR_MESSAGE = "An error occurred while fetching dashboard stats."


class GetDashboardStatsUseCase:
    """
    Use case for the dashboard headline figures.

    The year-to-date window starts on January 1 of the clock's current year.
    """

    def __init__(
        self,
        store: IAnalyticsStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._clock = clock

    async def execute(self) -> StatsResponse:
        year_start = date(self._clock().year, 1, 1)
        try:
            stats = await self._store.get_dashboard_stats(year_start)
        except StorageError as e:
            logger.error("dashboard_stats_failed", error=e.message)
            raise ReportQueryError("stats", ERROR_MESSAGE) from e

        logger.info(
            "dashboard_stats_fetched",
            year_start=year_start.isoformat(),
            invoices=stats.total_invoices_processed,
        )
        return StatsResponse(
            total_spend_ytd=stats.total_spend_ytd,
            total_invoices_processed=stats.total_invoices_processed,
            documents_uploaded=stats.documents_uploaded,
            average_invoice_value=stats.average_invoice_value,
        )
