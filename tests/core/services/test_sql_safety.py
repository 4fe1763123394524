"""Unit tests for the generated-SQL safety gate."""

import pytest
from sqlparse.exceptions import SQLParseError

from invoice_analytics.core.exceptions import UnsafeSQLError
from invoice_analytics.core.services import sql_safety
from invoice_analytics.core.services.sql_safety import (
    ensure_select_only,
    is_select_only,
    strip_code_fences,
)


class TestStripCodeFences:
    def test_sql_fence(self):
        assert strip_code_fences("```sql\nSELECT 1\n```") == "SELECT 1"

    def test_plain_fence_and_uppercase_tag(self):
        assert strip_code_fences("```SQL SELECT 1```") == "SELECT 1"
        assert strip_code_fences("```\nSELECT 1\n```") == "SELECT 1"

    def test_no_fence(self):
        assert strip_code_fences("  SELECT 1  ") == "SELECT 1"


class TestEnsureSelectOnly:
    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM invoices",
            "select count(*) from vendors",
            "SELECT v.vendor_name, SUM(i.total_amount) FROM invoices i "
            "JOIN vendors v ON v.id = i.vendor_id GROUP BY v.vendor_name",
        ],
    )
    def test_accepts_single_select(self, sql):
        assert ensure_select_only(sql) == sql

    def test_strips_trailing_semicolon(self):
        assert ensure_select_only("SELECT 1;") == "SELECT 1"

    def test_keywords_inside_literals_are_ignored(self):
        sql = "SELECT * FROM vendors WHERE vendor_name = 'Drop & Delete Ltd'"
        assert ensure_select_only(sql) == sql

    def test_identifiers_containing_keywords_are_ignored(self):
        sql = "SELECT updated_at, created_at FROM documents"
        assert ensure_select_only(sql) == sql

    @pytest.mark.parametrize(
        "sql",
        [
            "DROP TABLE invoices",
            "DELETE FROM invoices",
            "UPDATE invoices SET total_amount = 0",
            "INSERT INTO vendors (id, vendor_name) VALUES ('x', 'y')",
            "PRAGMA table_info(invoices)",
            "WITH x AS (SELECT 1) SELECT * FROM x",
            "",
        ],
    )
    def test_rejects_non_select(self, sql):
        with pytest.raises(UnsafeSQLError) as exc_info:
            ensure_select_only(sql)
        assert exc_info.value.reason == "not a SELECT statement"

    def test_rejects_stacked_statements(self):
        with pytest.raises(UnsafeSQLError) as exc_info:
            ensure_select_only("SELECT 1; DROP TABLE invoices")
        assert exc_info.value.reason == "multiple statements"

    def test_rejects_forbidden_keyword_inside_select(self):
        with pytest.raises(UnsafeSQLError) as exc_info:
            ensure_select_only("SELECT 1 FROM invoices WHERE EXISTS (DELETE FROM vendors)")
        assert exc_info.value.reason == "forbidden keyword DELETE"

    def test_rejects_statement_the_parser_gives_up_on(self, monkeypatch):
        def too_many_tokens(statement):
            raise SQLParseError("Maximum number of tokens exceeded (10000)")

        monkeypatch.setattr(sql_safety.sqlparse, "parse", too_many_tokens)
        nested = "SELECT " + "(" * 5000 + "1" + ")" * 5000

        with pytest.raises(UnsafeSQLError) as exc_info:
            ensure_select_only(nested)
        assert exc_info.value.reason == "unparsable statement"

    def test_is_select_only(self):
        assert is_select_only("SELECT 1")
        assert not is_select_only("DROP TABLE vendors")
