"""Data transfer objects for the API boundary."""

from invoice_analytics.application.dto.requests import (
    CashOutflowRequest,
    ChatWithDataRequest,
    InvoiceListRequest,
)
from invoice_analytics.application.dto.responses import (
    CashOutflowResponse,
    CategorySpendResponse,
    ChatWithDataResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceRowResponse,
    InvoiceTrendResponse,
    PageMetaResponse,
    ProviderHealthResponse,
    StatsResponse,
    TopVendorResponse,
)

__all__ = [
    # Requests
    "InvoiceListRequest",
    "CashOutflowRequest",
    "ChatWithDataRequest",
    # Responses
    "StatsResponse",
    "InvoiceTrendResponse",
    "TopVendorResponse",
    "CategorySpendResponse",
    "CashOutflowResponse",
    "InvoiceRowResponse",
    "PageMetaResponse",
    "InvoiceListResponse",
    "ChatWithDataResponse",
    "ProviderHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
