"""
Syntactic gate for LLM-generated SQL.

Only a single SELECT statement passes. Keywords are checked on the sqlparse
token stream, so words inside string literals or identifiers such as
``updated_at`` never trigger a rejection. Execution on a read-only
connection is the second line of defence.
"""

import re

import sqlparse
from sqlparse.exceptions import SQLParseError

from invoice_analytics.core.exceptions import UnsafeSQLError

FORBIDDEN_KEYWORDS = frozenset(
    {
        "INSERT",
        "UPDATE",
        "DELETE",
        "DROP",
        "ALTER",
        "CREATE",
        "TRUNCATE",
        "REPLACE",
        "ATTACH",
        "DETACH",
        "PRAGMA",
        "VACUUM",
        "REINDEX",
        "GRANT",
        "REVOKE",
        "MERGE",
        "UPSERT",
    }
)

_FENCE_RE = re.compile(r"```(?:sql)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences and surrounding whitespace."""
    return _FENCE_RE.sub("", text or "").strip()


def _forbidden_keyword(statement: str) -> str | None:
    for parsed in sqlparse.parse(statement):
        for token in parsed.flatten():
            if token.is_keyword and token.normalized.upper() in FORBIDDEN_KEYWORDS:
                return token.normalized.upper()
    return None


def ensure_select_only(sql: str) -> str:
    """
    Validate that ``sql`` is exactly one read-only SELECT statement.

    Args:
        sql: Sanitized candidate SQL

    Returns:
        The statement with any single trailing semicolon removed

    Raises:
        UnsafeSQLError: If the statement is not a lone SELECT or contains a
            data-modifying or schema keyword
    """
    candidate = (sql or "").strip()
    if not candidate.lower().startswith("select"):
        raise UnsafeSQLError("not a SELECT statement", candidate)

    try:
        statements = [s for s in sqlparse.split(candidate) if s.strip()]
    except SQLParseError as e:
        raise UnsafeSQLError("unparsable statement", candidate) from e
    if len(statements) != 1:
        raise UnsafeSQLError("multiple statements", candidate)

    statement = statements[0].strip()
    if statement.endswith(";"):
        statement = statement[:-1].rstrip()

    try:
        keyword = _forbidden_keyword(statement)
    except SQLParseError as e:
        raise UnsafeSQLError("unparsable statement", candidate) from e
    if keyword:
        raise UnsafeSQLError(f"forbidden keyword {keyword}", candidate)

    return statement


def is_select_only(sql: str) -> bool:
    try:
        ensure_select_only(sql)
    except UnsafeSQLError:
        return False
    return True
