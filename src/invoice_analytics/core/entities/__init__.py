"""Core domain entities."""

from invoice_analytics.core.entities.invoice import (
    Customer,
    Document,
    DocumentStatus,
    Invoice,
    LineItem,
    PaymentDetail,
    Vendor,
)
from invoice_analytics.core.entities.report import (
    CashOutflowPoint,
    CategorySpend,
    DashboardStats,
    InvoiceListRow,
    InvoicePage,
    InvoiceStatus,
    MonthlyTrend,
    VendorSpend,
)

__all__ = [
    # Invoice entities
    "Document",
    "DocumentStatus",
    "Vendor",
    "Customer",
    "Invoice",
    "LineItem",
    "PaymentDetail",
    # Report entities
    "InvoiceStatus",
    "DashboardStats",
    "MonthlyTrend",
    "VendorSpend",
    "CategorySpend",
    "CashOutflowPoint",
    "InvoiceListRow",
    "InvoicePage",
]
