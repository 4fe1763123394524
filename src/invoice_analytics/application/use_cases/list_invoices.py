"""
List Invoices Use Case.

Searchable, sortable, paginated invoice listing.
"""

from collections.abc import Callable
from datetime import datetime

from invoice_analytics.application.dto.requests import InvoiceListRequest
from invoice_analytics.application.dto.responses import (
    InvoiceListResponse,
    InvoiceRowResponse,
    PageMetaResponse,
)
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import ReportQueryError, StorageError
from invoice_analytics.core.interfaces import IAnalyticsStore
from invoice_analytics.core.services.formatting import utc_now
from invoice_analytics.core.services.query_builder import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    build_invoice_list_query,
)

logger = get_logger(__name__)

ERROR_MESSAGE = "Failed to list invoices"


class ListInvoicesUseCase:
    """
    Use case for GET /invoices.

    Unknown sort keys fall back to invoice date, non-numeric paging values
    to their defaults; nothing in the request can fail validation.
    """

    def __init__(
        self,
        store: IAnalyticsStore,
        clock: Callable[[], datetime] = utc_now,
        default_per_page: int = DEFAULT_PER_PAGE,
        max_per_page: int = MAX_PER_PAGE,
    ):
        self._store = store
        self._clock = clock
        self._default_per_page = default_per_page
        self._max_per_page = max_per_page

    async def execute(self, request: InvoiceListRequest) -> InvoiceListResponse:
        query = build_invoice_list_query(
            search=request.search,
            sort_by=request.sort_by,
            order=request.order,
            page=request.page,
            per_page=request.per_page,
            default_per_page=self._default_per_page,
            max_per_page=self._max_per_page,
        )

        try:
            page = await self._store.list_invoices(query, self._clock())
        except StorageError as e:
            logger.error("list_invoices_failed", error=e.message)
            raise ReportQueryError("invoices", ERROR_MESSAGE) from e

        logger.info(
            "invoices_listed",
            total=page.total,
            page=page.page,
            per_page=page.per_page,
            sort_by=query.sort_by.value,
            order=query.sort_order.value,
            searched=query.search is not None,
        )
        return InvoiceListResponse(
            meta=PageMetaResponse(
                page=page.page,
                per_page=page.per_page,
                total_pages=page.total_pages,
                total=page.total,
            ),
            data=[
                InvoiceRowResponse(
                    document_id=row.document_id,
                    vendor=row.vendor,
                    date=row.date,
                    invoice_number=row.invoice_number,
                    amount=row.amount,
                    status=row.status,
                )
                for row in page.rows
            ],
        )
