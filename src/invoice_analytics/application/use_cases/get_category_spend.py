"""Get Category Spend Use Case."""

from invoice_analytics.application.dto.responses import CategorySpendResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore

logger = get_logger(__name__)

ERROR_MESSAGE = "Failed to fetch category spend data."


class GetCategorySpendUseCase:
    """Line-item spend per bookkeeping category (Sachkonto, then BU-Schluessel)."""

    def __init__(self, store: IAnalyticsStore):
        self._store = store

    async def execute(self) -> list[CategorySpendResponse]:
        try:
            categories = await self._store.get_category_spend()
        except StorageError as e:
            logger.error("category_spend_failed", error=e.message)
            raise ReportQueryError("category_spend", ERROR_MESSAGE) from e

        return [CategorySpendResponse(category=c.category, spend=c.spend) for c in categories]
