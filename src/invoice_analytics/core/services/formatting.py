"""Money and date rendering shared by the reporting endpoints."""

from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

_CENT = Decimal("0.01")


def round_money(value: Any) -> float:
    """
    Round to two decimals, half away from zero.

    Rounds the decimal string form rather than the binary float, so
    1000.005 becomes 1000.01. None and unparsable values become 0.0.
    """
    if value is None:
        return 0.0
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return 0.0
    if not amount.is_finite():
        return 0.0
    return float(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def to_date(value: Any) -> date | None:
    """Coerce a stored date/datetime/ISO string into a calendar date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str | None:
    parsed = to_date(value)
    return parsed.isoformat() if parsed else None


def utc_now() -> datetime:
    """Default clock for date-relative reports."""
    return datetime.now(UTC)
