"""Response DTOs for API endpoints.

Pydantic v2 models for API responses. Reporting payloads use camelCase
field names on the wire.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for camelCase response payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Reporting ---


class StatsResponse(CamelModel):
    """Dashboard headline figures."""

    total_spend_ytd: float
    total_invoices_processed: int
    documents_uploaded: int
    average_invoice_value: float


class InvoiceTrendResponse(CamelModel):
    month: str
    invoice_count: int
    total_spend: float


class TopVendorResponse(CamelModel):
    vendor_id: str
    vendor_name: str
    total_spend: float


class CategorySpendResponse(CamelModel):
    category: str
    spend: float


class CashOutflowResponse(BaseModel):
    """One forecast point; field names are snake_case on the wire."""

    date: dt.date
    expected_outflow: float


class InvoiceRowResponse(CamelModel):
    document_id: str
    vendor: str
    date: dt.date
    invoice_number: str | None = None
    amount: float
    status: str


class PageMetaResponse(CamelModel):
    page: int
    per_page: int
    total_pages: int
    total: int


class InvoiceListResponse(BaseModel):
    meta: PageMetaResponse
    data: list[InvoiceRowResponse] = Field(default_factory=list)


# --- Chat with data ---


class ChatWithDataResponse(BaseModel):
    """Generated SQL and the rows it returned."""

    success: bool = True
    sql: str
    results: list[dict[str, Any]] = Field(default_factory=list)


# --- Health ---


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    llm: ProviderHealthResponse | None = None
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error body.

    Every error response includes the human-readable ``error`` message, a
    machine-readable ``error_code`` and the request ``path``.
    """

    error: str = Field(..., description="Human-readable error description")
    error_code: str = Field(..., description="Machine-readable error code")
    path: str | None = Field(default=None, description="Request path")
