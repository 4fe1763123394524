"""
Dashboard reporting endpoints.

Read-only aggregates over the invoice tables. All money values are
rounded to two decimals; field names are camelCase except for the cash
outflow series.
"""

from fastapi import APIRouter, Depends, Query

from invoice_analytics.api.dependencies import (
    get_cash_outflow_use_case,
    get_category_spend_use_case,
    get_dashboard_stats_use_case,
    get_invoice_trends_use_case,
    get_top_vendors_use_case,
)
from invoice_analytics.application.dto.requests import CashOutflowRequest
from invoice_analytics.application.dto.responses import (
    CashOutflowResponse,
    CategorySpendResponse,
    ErrorResponse,
    InvoiceTrendResponse,
    StatsResponse,
    TopVendorResponse,
)
from invoice_analytics.application.use_cases import (
    GetCashOutflowUseCase,
    GetCategorySpendUseCase,
    GetDashboardStatsUseCase,
    GetInvoiceTrendsUseCase,
    GetTopVendorsUseCase,
)

router = APIRouter(tags=["analytics"])

SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Database error"}}


@router.get("/stats", response_model=StatsResponse, responses=SERVER_ERROR)
async def get_stats(
    use_case: GetDashboardStatsUseCase = Depends(get_dashboard_stats_use_case),
) -> StatsResponse:
    """Year-to-date spend, invoice and document counts, average invoice value."""
    return await use_case.execute()


@router.get(
    "/invoice-trends",
    response_model=list[InvoiceTrendResponse],
    responses=SERVER_ERROR,
)
async def get_invoice_trends(
    use_case: GetInvoiceTrendsUseCase = Depends(get_invoice_trends_use_case),
) -> list[InvoiceTrendResponse]:
    """Invoice count and spend per calendar month, oldest month first."""
    return await use_case.execute()


@router.get("/vendors/top10", response_model=list[TopVendorResponse], responses=SERVER_ERROR)
async def get_top_vendors(
    use_case: GetTopVendorsUseCase = Depends(get_top_vendors_use_case),
) -> list[TopVendorResponse]:
    return await use_case.execute()


@router.get(
    "/category-spend",
    response_model=list[CategorySpendResponse],
    responses=SERVER_ERROR,
)
async def get_category_spend(
    use_case: GetCategorySpendUseCase = Depends(get_category_spend_use_case),
) -> list[CategorySpendResponse]:
    """Line-item spend grouped by bookkeeping category."""
    return await use_case.execute()


@router.get(
    "/cash-outflow",
    response_model=list[CashOutflowResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Malformed date"},
        **SERVER_ERROR,
    },
)
async def get_cash_outflow(
    from_date: str | None = Query(default=None, alias="from", description="YYYY-MM-DD"),
    to_date: str | None = Query(default=None, alias="to", description="YYYY-MM-DD"),
    use_case: GetCashOutflowUseCase = Depends(get_cash_outflow_use_case),
) -> list[CashOutflowResponse]:
    """
    Expected payments grouped by due date.

    The window defaults to today onwards and is capped at 365 dates.
    """
    return await use_case.execute(CashOutflowRequest(from_date=from_date, to_date=to_date))
