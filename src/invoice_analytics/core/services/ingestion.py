"""
Transformation of raw extraction records into schema entities.

Raw records are JSON exports of the document-extraction pipeline. Field
values are frequently wrapped (``{"value": ...}``, ``{"$numberLong": ...}``)
and numbers may arrive as strings with currency symbols. transform_record is
a pure function; persistence is the ingest store's job.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from invoice_analytics.core.entities.invoice import (
    Customer,
    Document,
    DocumentStatus,
    Invoice,
    LineItem,
    PaymentDetail,
    Vendor,
    new_id,
)

EPOCH_DATE = date(1970, 1, 1)

_WRAPPER_KEYS = ("value", "$numberLong", "$oid", "$date")
_NON_NUMERIC_RE = re.compile(r"[^\d.,-]")


@dataclass
class IngestBundle:
    """Everything one raw record contributes to the schema."""

    document: Document
    vendor: Vendor
    invoice: Invoice
    customer: Customer | None = None
    payment_detail: PaymentDetail | None = None
    line_items: list[LineItem] = field(default_factory=list)


def extract_value(raw: Any, default: Any = None) -> Any:
    """Unwrap a wrapped field value; null and blank strings become default."""
    value = raw
    if isinstance(raw, dict):
        for key in _WRAPPER_KEYS:
            if key in raw:
                value = raw[key]
                break
    if value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return value


def extract_number(raw: Any) -> float | None:
    """Parse a possibly decorated number; currency symbols and a decimal comma are tolerated."""
    value = extract_value(raw)
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, str):
        value = _NON_NUMERIC_RE.sub("", value).replace(",", ".", 1)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def extract_date(raw: Any) -> datetime | None:
    """Parse an ISO-8601 date or timestamp."""
    value = extract_value(raw)
    if isinstance(value, dict):
        value = extract_value(value)
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def extract_text(raw: Any) -> str | None:
    value = extract_value(raw)
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value).strip()


def _section(llm_data: dict[str, Any], name: str) -> dict[str, Any]:
    section = llm_data.get(name)
    if isinstance(section, dict):
        inner = section.get("value")
        if isinstance(inner, dict):
            return inner
    return {}


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value else None


def _line_item_rows(llm_data: dict[str, Any]) -> list[Any]:
    container = llm_data.get("lineItems")
    if not isinstance(container, dict):
        return []
    value = container.get("value")
    if isinstance(value, dict):
        items = value.get("items")
        if isinstance(items, dict) and isinstance(items.get("value"), list):
            return items["value"]
    if isinstance(value, list):
        return value
    return []


def build_line_items(document_id: str, llm_data: dict[str, Any]) -> list[LineItem]:
    items: list[LineItem] = []
    for index, raw_item in enumerate(_line_item_rows(llm_data)):
        if not isinstance(raw_item, dict):
            continue
        item = {key: extract_value(value) for key, value in raw_item.items()}
        line_number = extract_number(item.get("srNo"))
        items.append(
            LineItem(
                invoice_document_id=document_id,
                line_number=int(line_number) if line_number is not None else index + 1,
                description=extract_text(item.get("description")),
                quantity=extract_number(item.get("quantity")),
                unit_price=extract_number(item.get("unitPrice")),
                total_price=extract_number(item.get("totalPrice")),
                sachkonto=extract_value(item.get("Sachkonto"), ""),
                bu_schluessel=extract_value(item.get("BUSchluessel"), ""),
                vat_rate=extract_number(item.get("vatRate")),
                vat_amount=extract_number(item.get("vatAmount")),
            )
        )
    return items


def build_payment_detail(document_id: str, payment: dict[str, Any]) -> PaymentDetail | None:
    """Payment detail only when at least one payment field carries a value."""
    if not any(extract_value(payment.get(name)) is not None for name in payment):
        return None
    return PaymentDetail(
        invoice_document_id=document_id,
        due_date=_as_date(extract_date(payment.get("dueDate"))),
        payment_terms=extract_text(payment.get("paymentTerms")),
        bank_account_number=extract_text(payment.get("bankAccountNumber")),
        bic=extract_text(payment.get("BIC")),
        account_name=extract_text(payment.get("accountName")),
        net_days=extract_number(payment.get("netDays")),
        discount_percentage=extract_number(payment.get("discountPercentage")),
        discount_days=extract_number(payment.get("discountDays")),
        discount_due_date=_as_date(extract_date(payment.get("discountDueDate"))),
        discounted_total=extract_number(payment.get("discountedTotal")),
    )


def build_document(record: dict[str, Any], document_id: str) -> Document:
    now = datetime.now(UTC)
    validated = extract_value(record.get("isValidatedByHuman"), False)
    return Document(
        id=document_id,
        name=extract_text(record.get("name")) or "",
        file_path=extract_text(record.get("filePath")) or "",
        file_type=extract_text(record.get("fileType")) or "application/octet-stream",
        file_size=extract_number(record.get("fileSize")),
        status=extract_text(record.get("status")) or DocumentStatus.UPLOADED.value,
        organization_id=extract_text(record.get("organizationId")) or "unknown",
        department_id=extract_text(record.get("departmentId")) or "unknown",
        uploaded_by_id=extract_text(record.get("uploadedById")) or "unknown",
        created_at=extract_date(record.get("createdAt")) or now,
        updated_at=extract_date(record.get("updatedAt")) or now,
        processed_at=extract_date(record.get("processedAt")),
        is_validated_by_human=validated is True or str(validated).lower() == "true",
        analytics_id=extract_text(record.get("analyticsId")),
    )


def transform_record(record: dict[str, Any]) -> IngestBundle | None:
    """
    Transform one raw extraction record.

    Returns:
        IngestBundle, or None when the record has no LLM extraction or no
        parsable invoice total
    """
    extracted = record.get("extractedData")
    llm_data = extracted.get("llmData") if isinstance(extracted, dict) else None
    if not isinstance(llm_data, dict):
        return None

    summary = _section(llm_data, "summary")
    total = extract_number(summary.get("invoiceTotal"))
    if total is None:
        return None

    document_id = extract_text(record.get("_id")) or new_id()
    invoice_raw = _section(llm_data, "invoice")
    vendor_raw = _section(llm_data, "vendor")
    customer_raw = _section(llm_data, "customer")

    vendor = Vendor(
        vendor_name=extract_text(vendor_raw.get("vendorName")),
        vendor_address=extract_text(vendor_raw.get("vendorAddress")),
        vendor_tax_id=extract_text(vendor_raw.get("vendorTaxId")),
        vendor_party_number=extract_text(vendor_raw.get("vendorPartyNumber")),
    )

    customer = None
    customer_name = extract_text(customer_raw.get("customerName"))
    if customer_name:
        customer = Customer(
            customer_name=customer_name,
            customer_address=extract_text(customer_raw.get("customerAddress")),
            customer_tax_id=extract_text(customer_raw.get("customerTaxId")),
        )

    invoice = Invoice(
        document_id=document_id,
        vendor_id=vendor.id,
        customer_id=customer.id if customer else None,
        invoice_number=extract_text(invoice_raw.get("invoiceId")),
        invoice_date=_as_date(extract_date(invoice_raw.get("invoiceDate"))) or EPOCH_DATE,
        delivery_date=_as_date(extract_date(invoice_raw.get("deliveryDate"))),
        document_type=extract_text(summary.get("documentType")),
        total_amount=total,
        total_tax=extract_number(summary.get("totalTax")),
        sub_total=extract_number(summary.get("subTotal")),
        currency=extract_text(summary.get("currencySymbol")),
    )

    return IngestBundle(
        document=build_document(record, document_id),
        vendor=vendor,
        customer=customer,
        invoice=invoice,
        payment_detail=build_payment_detail(document_id, _section(llm_data, "payment")),
        line_items=build_line_items(document_id, llm_data),
    )


def transform_records(records: list[Any]) -> tuple[list[IngestBundle], int]:
    """Transform a batch; returns (bundles, number of skipped records)."""
    bundles: list[IngestBundle] = []
    skipped = 0
    for record in records:
        bundle = transform_record(record) if isinstance(record, dict) else None
        if bundle is None:
            skipped += 1
            continue
        bundles.append(bundle)
    return bundles, skipped
