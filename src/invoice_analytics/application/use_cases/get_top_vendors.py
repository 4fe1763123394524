"""Get Top Vendors Use Case."""

from invoice_analytics.application.dto.responses import TopVendorResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore

logger = get_logger(__name__)

ERROR_MESSAGE = "Failed to fetch top vendors data."


class GetTopVendorsUseCase:
    """
    Vendors ranked by total invoiced amount.

    Equal totals are ordered by vendor id so the ranking is deterministic.
    """

    def __init__(self, store: IAnalyticsStore, limit: int = 10):
        self._store = store
        self._limit = limit

    async def execute(self) -> list[TopVendorResponse]:
        try:
            vendors = await self._store.get_top_vendors(self._limit)
        except StorageError as e:
            logger.error("top_vendors_failed", error=e.message)
            raise ReportQueryError("top_vendors", ERROR_MESSAGE) from e

        return [
            TopVendorResponse(
                vendor_id=v.vendor_id,
                vendor_name=v.vendor_name,
                total_spend=v.total_spend,
            )
            for v in vendors
        ]
