"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Query-string values stay raw strings here; interpretation (defaults,
clamping, allow-lists) belongs to the query builder.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InvoiceListRequest(BaseModel):
    """Raw query parameters of GET /invoices."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    search: str | None = Field(default=None, description="Vendor name or invoice number fragment")
    sort_by: str | None = Field(
        default=None,
        description="invoiceDate, invoiceNumber, amount or vendor",
        examples=["invoiceDate", "amount"],
    )
    order: str | None = Field(default=None, description="asc or desc", examples=["desc"])
    page: str | None = Field(default=None, description="1-based page number")
    per_page: str | None = Field(default=None, description="Rows per page (1-100)")


class CashOutflowRequest(BaseModel):
    """Raw query parameters of GET /cash-outflow."""

    from_date: str | None = Field(default=None, alias="from", description="YYYY-MM-DD")
    to_date: str | None = Field(default=None, alias="to", description="YYYY-MM-DD")

    model_config = ConfigDict(populate_by_name=True)


class ChatWithDataRequest(BaseModel):
    """Request body of POST /chat-with-data.

    ``query`` is typed loosely so a non-string value reaches the use case
    and is rejected with the endpoint's own error message.
    """

    query: Any = Field(
        default=None,
        description="Question about the invoice data",
        examples=["Which vendor did we spend the most with last quarter?"],
    )
