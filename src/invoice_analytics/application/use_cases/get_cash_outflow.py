"""
Get Cash Outflow Use Case.

Forward-looking forecast of payments grouped by due date.
"""

from collections.abc import Callable
from datetime import datetime

from invoice_analytics.application.dto.requests import CashOutflowRequest
from invoice_analytics.application.dto.responses import CashOutflowResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore
from invoice_analytics.core.services.formatting import utc_now
from invoice_analytics.core.services.query_builder import CASH_OUTFLOW_LIMIT, parse_date_param

logger = get_logger(__name__)

ERROR_MESSAGE = "Failed to fetch cash outflow data."


class GetCashOutflowUseCase:
    """
    Expected outflow per due date.

    Without ``from`` the window starts today; without ``to`` it is open
    ended. At most ``limit`` dates are returned.
    """

    def __init__(
        self,
        store: IAnalyticsStore,
        clock: Callable[[], datetime] = utc_now,
        limit: int = CASH_OUTFLOW_LIMIT,
    ):
        self._store = store
        self._clock = clock
        self._limit = limit

    async def execute(self, request: CashOutflowRequest) -> list[CashOutflowResponse]:
        # Raises InvalidParameterError (400) for malformed dates
        start = parse_date_param("from", request.from_date) or self._clock().date()
        end = parse_date_param("to", request.to_date)

        try:
            points = await self._store.get_cash_outflow(start, end, self._limit)
        except StorageError as e:
            logger.error("cash_outflow_failed", error=e.message)
            raise ReportQueryError("cash_outflow", ERROR_MESSAGE) from e

        logger.info(
            "cash_outflow_fetched",
            start=start.isoformat(),
            end=end.isoformat() if end else None,
            points=len(points),
        )
        return [
            CashOutflowResponse(date=p.date, expected_outflow=p.expected_outflow) for p in points
        ]
