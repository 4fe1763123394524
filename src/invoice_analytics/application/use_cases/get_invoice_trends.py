"""Get Invoice Trends Use Case."""

from invoice_analytics.application.dto.responses import InvoiceTrendResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore

logger = get_logger(__name__)

ERROR_MESSAGE = "Failed to fetch invoice trends."


class GetInvoiceTrendsUseCase:
    """Invoice count and spend per calendar month, oldest first."""

    def __init__(self, store: IAnalyticsStore):
        self._store = store

    async def execute(self) -> list[InvoiceTrendResponse]:
        try:
            trends = await self._store.get_invoice_trends()
        except StorageError as e:
            logger.error("invoice_trends_failed", error=e.message)
            raise ReportQueryError("invoice_trends", ERROR_MESSAGE) from e

        return [
            InvoiceTrendResponse(
                month=t.month,
                invoice_count=t.invoice_count,
                total_spend=t.total_spend,
            )
            for t in trends
        ]
