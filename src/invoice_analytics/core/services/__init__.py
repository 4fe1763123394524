"""
Core business logic services.

Layer-pure services that depend only on:
- invoice_analytics/core/entities/*
- invoice_analytics/core/interfaces/*
- invoice_analytics/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from invoice_analytics.core.services.formatting import format_date, round_money, to_date
from invoice_analytics.core.services.ingestion import (
    IngestBundle,
    extract_date,
    extract_number,
    extract_value,
    transform_record,
    transform_records,
)
from invoice_analytics.core.services.invoice_status import derive_status
from invoice_analytics.core.services.nl_to_sql import ChatAnswer, NLToSQLService
from invoice_analytics.core.services.query_builder import (
    InvoiceListQuery,
    Pagination,
    SortColumn,
    SortDirection,
    SQLStatement,
    build_invoice_list_query,
    parse_date_param,
    parse_pagination,
)
from invoice_analytics.core.services.sql_safety import (
    ensure_select_only,
    is_select_only,
    strip_code_fences,
)

__all__ = [
    # Query builder
    "SQLStatement",
    "Pagination",
    "SortColumn",
    "SortDirection",
    "InvoiceListQuery",
    "parse_pagination",
    "parse_date_param",
    "build_invoice_list_query",
    # Formatting and status
    "round_money",
    "to_date",
    "format_date",
    "derive_status",
    # NL-to-SQL
    "NLToSQLService",
    "ChatAnswer",
    "ensure_select_only",
    "is_select_only",
    "strip_code_fences",
    # Ingestion
    "IngestBundle",
    "extract_value",
    "extract_number",
    "extract_date",
    "transform_record",
    "transform_records",
]
