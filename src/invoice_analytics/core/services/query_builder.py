"""
Parameterized SQL construction for the reporting endpoints.

Request parameters are untrusted. Values only ever travel as bound
parameters; the only text spliced into a statement comes from the
SortColumn / SortDirection enums below.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any

from invoice_analytics.core.exceptions import InvalidParameterError

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
CASH_OUTFLOW_LIMIT = 365

# OFFSET is bound as a signed 64-bit SQLite integer
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class SQLStatement:
    """Statement text plus its positional parameters."""

    text: str
    params: tuple[Any, ...] = ()


@dataclass(frozen=True)
class Pagination:
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class SortColumn(str, Enum):
    """Allow-listed sort keys accepted from the client."""

    INVOICE_DATE = "invoiceDate"
    INVOICE_NUMBER = "invoiceNumber"
    AMOUNT = "amount"
    VENDOR = "vendor"

    @property
    def sql(self) -> str:
        return _SORT_COLUMN_SQL[self]

    @classmethod
    def parse(cls, raw: str | None) -> "SortColumn":
        for member in cls:
            if member.value == raw:
                return member
        return cls.INVOICE_DATE


_SORT_COLUMN_SQL = {
    SortColumn.INVOICE_DATE: "i.invoice_date",
    SortColumn.INVOICE_NUMBER: "i.invoice_number",
    SortColumn.AMOUNT: "i.total_amount",
    SortColumn.VENDOR: "v.vendor_name",
}


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, raw: str | None) -> "SortDirection":
        if raw is not None and raw.strip().lower() == "asc":
            return cls.ASC
        return cls.DESC


@dataclass(frozen=True)
class InvoiceListQuery:
    """Validated listing parameters."""

    pagination: Pagination
    search: str | None = None
    sort_by: SortColumn = SortColumn.INVOICE_DATE
    sort_order: SortDirection = SortDirection.DESC


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def parse_pagination(
    page: Any = None,
    per_page: Any = None,
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: int = MAX_PER_PAGE,
) -> Pagination:
    """
    Normalize page/perPage query values.

    Non-numeric input falls back to the default. per_page is clamped to
    [1, max_per_page]; page is floored at 1 and capped so the row offset
    still fits an SQLite integer (such a page is simply empty).
    """
    size = _parse_int(per_page, default_per_page)
    size = min(max(1, size), max_per_page)
    page_num = max(1, _parse_int(page, DEFAULT_PAGE))
    page_num = min(page_num, MAX_OFFSET // size)
    return Pagination(page=page_num, per_page=size)


def normalize_search(raw: str | None) -> str | None:
    if raw is None:
        return None
    trimmed = raw.strip()
    return trimmed or None


def build_invoice_list_query(
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
    page: Any = None,
    per_page: Any = None,
    default_per_page: int = DEFAULT_PER_PAGE,
    max_per_page: int = MAX_PER_PAGE,
) -> InvoiceListQuery:
    """Build the listing query from raw request values."""
    return InvoiceListQuery(
        pagination=parse_pagination(page, per_page, default_per_page, max_per_page),
        search=normalize_search(search),
        sort_by=SortColumn.parse(sort_by),
        sort_order=SortDirection.parse(order),
    )


_INVOICE_LIST_FROM = """
    FROM invoices i
    JOIN vendors v ON v.id = i.vendor_id
    JOIN documents d ON d.id = i.document_id
    LEFT JOIN payment_details pd ON pd.invoice_document_id = i.document_id
"""

# casefold() is registered on every pooled connection; SQLite LOWER and LIKE
# only fold ASCII letters
_SEARCH_PREDICATE = "(casefold(v.vendor_name) LIKE ? OR casefold(i.invoice_number) LIKE ?)"


def _invoice_list_where(query: InvoiceListQuery) -> tuple[str, tuple[Any, ...]]:
    if query.search is None:
        return "", ()
    pattern = f"%{query.search.casefold()}%"
    return f"WHERE {_SEARCH_PREDICATE}", (pattern, pattern)


def invoice_list_statements(query: InvoiceListQuery) -> tuple[SQLStatement, SQLStatement]:
    """
    Data and count statements for one listing page.

    Both share FROM/WHERE so the total always describes the same row set.
    The document id tie-break keeps page boundaries stable under equal keys.

    Returns:
        (data statement, count statement)
    """
    where, where_params = _invoice_list_where(query)

    data_sql = f"""
        SELECT i.document_id, i.invoice_number, i.invoice_date, i.total_amount,
               v.vendor_name, d.status AS document_status, pd.due_date
        {_INVOICE_LIST_FROM}
        {where}
        ORDER BY {query.sort_by.sql} {query.sort_order.value}, i.document_id ASC
        LIMIT ? OFFSET ?
    """
    data = SQLStatement(
        text=data_sql,
        params=where_params + (query.pagination.per_page, query.pagination.offset),
    )

    count_sql = f"""
        SELECT COUNT(*) AS total
        {_INVOICE_LIST_FROM}
        {where}
    """
    count = SQLStatement(text=count_sql, params=where_params)
    return data, count


def parse_date_param(field: str, raw: str | None) -> date | None:
    """Parse an optional YYYY-MM-DD value; a full ISO timestamp is also accepted."""
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    try:
        if "T" in value:
            return datetime.fromisoformat(value).date()
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidParameterError(field, raw, "expected a YYYY-MM-DD date") from e


def cash_outflow_statement(
    start: date,
    end: date | None = None,
    limit: int = CASH_OUTFLOW_LIMIT,
) -> SQLStatement:
    """
    Expected outflow per due date.

    The discounted total is preferred over the invoice total when present.
    """
    conditions = ["pd.due_date IS NOT NULL", "date(pd.due_date) >= ?"]
    params: list[Any] = [start.isoformat()]
    if end is not None:
        conditions.append("date(pd.due_date) <= ?")
        params.append(end.isoformat())
    params.append(limit)

    sql = f"""
        SELECT date(pd.due_date) AS date,
               SUM(COALESCE(pd.discounted_total, i.total_amount, 0)) AS expected_outflow
        FROM payment_details pd
        JOIN invoices i ON i.document_id = pd.invoice_document_id
        WHERE {" AND ".join(conditions)}
        GROUP BY date(pd.due_date)
        ORDER BY date(pd.due_date) ASC
        LIMIT ?
    """
    return SQLStatement(text=sql, params=tuple(params))


def dashboard_stats_statements(year_start: date) -> tuple[SQLStatement, SQLStatement, SQLStatement]:
    """(year-to-date aggregate, invoice count, document count)."""
    ytd = SQLStatement(
        text="""
            SELECT COALESCE(SUM(total_amount), 0) AS total_spend,
                   AVG(total_amount) AS average_value
            FROM invoices
            WHERE invoice_date >= ?
        """,
        params=(year_start.isoformat(),),
    )
    invoices = SQLStatement(text="SELECT COUNT(*) AS total FROM invoices")
    documents = SQLStatement(text="SELECT COUNT(*) AS total FROM documents")
    return ytd, invoices, documents


def invoice_trends_statement() -> SQLStatement:
    return SQLStatement(
        text="""
            SELECT strftime('%Y-%m', invoice_date) AS month,
                   COUNT(*) AS invoice_count,
                   COALESCE(SUM(total_amount), 0) AS total_spend
            FROM invoices
            GROUP BY month
            ORDER BY month ASC
        """
    )


def top_vendors_statement(limit: int = 10) -> SQLStatement:
    return SQLStatement(
        text="""
            SELECT i.vendor_id AS vendor_id,
                   COALESCE(v.vendor_name, 'Unknown Vendor') AS vendor_name,
                   COALESCE(SUM(i.total_amount), 0) AS total_spend
            FROM invoices i
            LEFT JOIN vendors v ON v.id = i.vendor_id
            GROUP BY i.vendor_id
            ORDER BY total_spend DESC, i.vendor_id ASC
            LIMIT ?
        """,
        params=(limit,),
    )


def category_spend_statement() -> SQLStatement:
    return SQLStatement(
        text="""
            SELECT COALESCE(NULLIF(TRIM(sachkonto), ''),
                            NULLIF(TRIM(bu_schluessel), ''),
                            'Unknown') AS category,
                   COALESCE(SUM(total_price), 0) AS spend
            FROM line_items
            GROUP BY category
            ORDER BY spend DESC, category ASC
        """
    )
