"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services and stores

Use cases are the only entry point for API handlers.
"""

from invoice_analytics.application.dto import (
    CashOutflowRequest,
    ChatWithDataRequest,
    ChatWithDataResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListRequest,
    InvoiceListResponse,
    StatsResponse,
)
from invoice_analytics.application.use_cases import (
    ChatWithDataUseCase,
    GetCashOutflowUseCase,
    GetCategorySpendUseCase,
    GetDashboardStatsUseCase,
    GetInvoiceTrendsUseCase,
    GetTopVendorsUseCase,
    ListInvoicesUseCase,
    SeedInvoicesUseCase,
)

__all__ = [
    # DTOs
    "InvoiceListRequest",
    "CashOutflowRequest",
    "ChatWithDataRequest",
    "StatsResponse",
    "InvoiceListResponse",
    "ChatWithDataResponse",
    "HealthResponse",
    "ErrorResponse",
    # Use Cases
    "GetDashboardStatsUseCase",
    "GetInvoiceTrendsUseCase",
    "GetTopVendorsUseCase",
    "GetCategorySpendUseCase",
    "GetCashOutflowUseCase",
    "ListInvoicesUseCase",
    "ChatWithDataUseCase",
    "SeedInvoicesUseCase",
]
