"""
Invoice listing endpoint.
"""

from fastapi import APIRouter, Depends, Query

from invoice_analytics.api.dependencies import get_list_invoices_use_case
from invoice_analytics.application.dto.requests import InvoiceListRequest
from invoice_analytics.application.dto.responses import ErrorResponse, InvoiceListResponse
from invoice_analytics.application.use_cases import ListInvoicesUseCase

router = APIRouter(tags=["invoices"])


@router.get(
    "/invoices",
    response_model=InvoiceListResponse,
    responses={500: {"model": ErrorResponse, "description": "Database error"}},
)
async def list_invoices(
    search: str | None = Query(default=None, description="Vendor name or invoice number"),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str | None = Query(default=None),
    # Kept as strings: malformed paging values fall back to defaults
    page: str | None = Query(default=None),
    per_page: str | None = Query(default=None, alias="perPage"),
    use_case: ListInvoicesUseCase = Depends(get_list_invoices_use_case),
) -> InvoiceListResponse:
    """
    Search, sort and paginate invoices.

    sortBy accepts invoiceDate, invoiceNumber, amount or vendor; anything
    else sorts by invoice date. perPage is clamped to 1..100.
    """
    request = InvoiceListRequest(
        search=search,
        sort_by=sort_by,
        order=order,
        page=page,
        per_page=per_page,
    )
    return await use_case.execute(request)
