"""
Dependency injection container for FastAPI.

Shared resources (settings, connection pools, LLM provider) are created by
the application lifespan and kept on ``app.state``. Stores, services and
use cases are cheap wrappers built per request from those resources.
"""

from fastapi import Depends, Request

from invoice_analytics.application.use_cases import (
    ChatWithDataUseCase,
    GetCashOutflowUseCase,
    GetCategorySpendUseCase,
    GetDashboardStatsUseCase,
    GetInvoiceTrendsUseCase,
    GetTopVendorsUseCase,
    ListInvoicesUseCase,
)
from invoice_analytics.config import Settings
from invoice_analytics.core.interfaces import ILLMProvider
from invoice_analytics.core.services import NLToSQLService
from invoice_analytics.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteAnalyticsStore,
    SQLiteQueryExecutor,
)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    """Read-write pool used by the reporting queries."""
    return request.app.state.pool


def get_read_only_pool(request: Request) -> ConnectionPool:
    """Read-only pool reserved for model-generated SQL."""
    return request.app.state.read_pool


def get_llm(request: Request) -> ILLMProvider:
    return request.app.state.llm


# Store dependencies
def get_analytics_store(pool: ConnectionPool = Depends(get_pool)) -> SQLiteAnalyticsStore:
    return SQLiteAnalyticsStore(pool)


def get_query_executor(
    pool: ConnectionPool = Depends(get_read_only_pool),
) -> SQLiteQueryExecutor:
    return SQLiteQueryExecutor(pool)


# Service dependencies
def get_nl_to_sql_service(
    llm: ILLMProvider = Depends(get_llm),
    executor: SQLiteQueryExecutor = Depends(get_query_executor),
    settings: Settings = Depends(get_app_settings),
) -> NLToSQLService:
    return NLToSQLService(
        llm=llm,
        executor=executor,
        temperature=settings.llm.temperature,
        max_tokens=settings.llm.max_tokens,
        error_preview_chars=settings.query.error_preview_chars,
    )


# Use case dependencies
def get_dashboard_stats_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
) -> GetDashboardStatsUseCase:
    return GetDashboardStatsUseCase(store)


def get_invoice_trends_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
) -> GetInvoiceTrendsUseCase:
    return GetInvoiceTrendsUseCase(store)


def get_top_vendors_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
    settings: Settings = Depends(get_app_settings),
) -> GetTopVendorsUseCase:
    return GetTopVendorsUseCase(store, limit=settings.query.top_vendors_limit)


def get_category_spend_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
) -> GetCategorySpendUseCase:
    return GetCategorySpendUseCase(store)


def get_cash_outflow_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
    settings: Settings = Depends(get_app_settings),
) -> GetCashOutflowUseCase:
    return GetCashOutflowUseCase(store, limit=settings.query.cash_outflow_limit)


def get_list_invoices_use_case(
    store: SQLiteAnalyticsStore = Depends(get_analytics_store),
    settings: Settings = Depends(get_app_settings),
) -> ListInvoicesUseCase:
    return ListInvoicesUseCase(
        store,
        default_per_page=settings.query.default_per_page,
        max_per_page=settings.query.max_per_page,
    )


def get_chat_with_data_use_case(
    service: NLToSQLService = Depends(get_nl_to_sql_service),
) -> ChatWithDataUseCase:
    return ChatWithDataUseCase(service)
