"""Application use cases."""

from invoice_analytics.application.use_cases.chat_with_data import ChatWithDataUseCase
from invoice_analytics.application.use_cases.get_cash_outflow import GetCashOutflowUseCase
from invoice_analytics.application.use_cases.get_category_spend import GetCategorySpendUseCase
from invoice_analytics.application.use_cases.get_dashboard_stats import GetDashboardStatsUseCase
from invoice_analytics.application.use_cases.get_invoice_trends import GetInvoiceTrendsUseCase
from invoice_analytics.application.use_cases.get_top_vendors import GetTopVendorsUseCase
from invoice_analytics.application.use_cases.list_invoices import ListInvoicesUseCase
from invoice_analytics.application.use_cases.seed_invoices import SeedInvoicesUseCase, read_records

__all__ = [
    "GetDashboardStatsUseCase",
    "GetInvoiceTrendsUseCase",
    "GetTopVendorsUseCase",
    "GetCategorySpendUseCase",
    "GetCashOutflowUseCase",
    "ListInvoicesUseCase",
    "ChatWithDataUseCase",
    "SeedInvoicesUseCase",
    "read_records",
]
