"""
Invoice display status.

A single state machine shared by every listing:

    paid                           -> Paid
    processed, due date passed     -> Overdue
    processed, due date not passed -> Due
    processed, no due date         -> Processed
    missing / blank                -> Unknown
    anything else                  -> passed through unchanged
"""

from datetime import UTC, date, datetime

from invoice_analytics.core.entities.invoice import DocumentStatus
from invoice_analytics.core.entities.report import InvoiceStatus


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def derive_status(
    document_status: str | None,
    due_date: date | datetime | None,
    now: datetime,
) -> str:
    """
    Map a document status plus due date to the displayed invoice status.

    A due date is overdue only when it lies strictly before now.
    """
    if document_status is None or not document_status.strip():
        return InvoiceStatus.UNKNOWN.value

    normalized = document_status.strip().lower()
    if normalized == DocumentStatus.PAID.value:
        return InvoiceStatus.PAID.value
    if normalized != DocumentStatus.PROCESSED.value:
        return document_status

    if due_date is None:
        return InvoiceStatus.PROCESSED.value
    if _as_datetime(due_date) < _as_datetime(now):
        return InvoiceStatus.OVERDUE.value
    return InvoiceStatus.DUE.value
