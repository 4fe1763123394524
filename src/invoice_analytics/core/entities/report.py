"""
Reporting read models.

Rows produced by the analytics store after post-processing: money already
rounded to cents, dates already calendar dates.
"""

import datetime as dt
from enum import Enum

from pydantic import BaseModel, Field


class InvoiceStatus(str, Enum):
    """Display status derived for an invoice listing row."""

    UNKNOWN = "Unknown"
    DUE = "Due"
    OVERDUE = "Overdue"
    PROCESSED = "Processed"
    PAID = "Paid"


class DashboardStats(BaseModel):
    total_spend_ytd: float = 0.0
    total_invoices_processed: int = 0
    documents_uploaded: int = 0
    average_invoice_value: float = 0.0


class MonthlyTrend(BaseModel):
    month: str  # YYYY-MM
    invoice_count: int = 0
    total_spend: float = 0.0


class VendorSpend(BaseModel):
    vendor_id: str
    vendor_name: str
    total_spend: float = 0.0


class CategorySpend(BaseModel):
    category: str
    spend: float = 0.0


class CashOutflowPoint(BaseModel):
    date: dt.date
    expected_outflow: float = 0.0


class InvoiceListRow(BaseModel):
    document_id: str
    vendor: str
    date: dt.date
    invoice_number: str | None = None
    amount: float = 0.0
    status: str = InvoiceStatus.UNKNOWN.value


class InvoicePage(BaseModel):
    """One page of the invoice listing plus the matching total."""

    page: int
    per_page: int
    total: int
    rows: list[InvoiceListRow] = Field(default_factory=list)

    @property
    def total_pages(self) -> int:
        if self.per_page <= 0:
            return 0
        return -(-self.total // self.per_page)
