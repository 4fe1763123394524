"""
Invoice domain entities with Pydantic v2 validation.

These mirror the relational schema the reporting queries read. Records are
created by the ingestion pipeline only; the service never mutates them.
"""

from datetime import UTC, date, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    return str(uuid4())


class DocumentStatus(str, Enum):
    """Known processing states of an uploaded document."""

    UPLOADED = "uploaded"
    PROCESSING = "processing"
    PROCESSED = "processed"
    PAID = "paid"
    FAILED = "failed"


class Document(BaseModel):
    """Upload/processing envelope an invoice is extracted from."""

    id: str = Field(default_factory=new_id)
    name: str = ""
    file_path: str = ""
    file_type: str = "application/octet-stream"
    file_size: float | None = None
    status: str = DocumentStatus.UPLOADED.value
    organization_id: str = "unknown"
    department_id: str = "unknown"
    uploaded_by_id: str = "unknown"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    processed_at: datetime | None = None
    is_validated_by_human: bool = False
    analytics_id: str | None = None


class Vendor(BaseModel):
    """Invoice issuer."""

    id: str = Field(default_factory=new_id)
    vendor_name: str
    vendor_address: str | None = None
    vendor_tax_id: str | None = None
    vendor_party_number: str | None = None

    @field_validator("vendor_name", mode="before")
    @classmethod
    def placeholder_name(cls, v: Any) -> str:
        """Substitute a generated placeholder for a blank name."""
        if v is None or not str(v).strip():
            return f"Unknown Vendor {new_id()[:8]}"
        return str(v).strip()


class Customer(BaseModel):
    """Invoice recipient."""

    id: str = Field(default_factory=new_id)
    customer_name: str
    customer_address: str | None = None
    customer_tax_id: str | None = None

    @field_validator("customer_name", mode="before")
    @classmethod
    def placeholder_name(cls, v: Any) -> str:
        """Substitute a generated placeholder for a blank name."""
        if v is None or not str(v).strip():
            return f"Unknown Customer {new_id()[:8]}"
        return str(v).strip()


class Invoice(BaseModel):
    """
    Invoice header keyed by its document.

    total_amount may be negative for credit notes.
    """

    document_id: str
    vendor_id: str
    customer_id: str | None = None
    invoice_number: str | None = None
    invoice_date: date = date(1970, 1, 1)
    delivery_date: date | None = None
    document_type: str | None = None
    total_amount: float = 0.0
    total_tax: float | None = None
    sub_total: float | None = None
    currency: str | None = None


class LineItem(BaseModel):
    """Invoice line with the two bookkeeping category codes."""

    id: int | None = None
    invoice_document_id: str
    line_number: int = 0
    description: str | None = None
    quantity: float | None = None
    unit_price: float | None = None
    total_price: float | None = None
    sachkonto: str = ""
    bu_schluessel: str = ""
    vat_rate: float | None = None
    vat_amount: float | None = None

    @field_validator("sachkonto", "bu_schluessel", mode="before")
    @classmethod
    def coerce_code(cls, v: Any) -> str:
        """Category codes arrive as numbers or strings; store as text."""
        if v is None:
            return ""
        return str(v).strip()


class PaymentDetail(BaseModel):
    """Payment terms, one-to-one with an invoice."""

    invoice_document_id: str
    due_date: date | None = None
    payment_terms: str | None = None
    bank_account_number: str | None = None
    bic: str | None = None
    account_name: str | None = None
    net_days: float | None = None
    discount_percentage: float | None = None
    discount_days: float | None = None
    discount_due_date: date | None = None
    discounted_total: float | None = None
