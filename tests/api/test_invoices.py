"""API tests for the invoice listing endpoint."""

from datetime import date

import pytest
from fastapi.testclient import TestClient


class TestListInvoices:
    def test_default_listing(self, client: TestClient):
        response = client.get("/invoices")

        assert response.status_code == 200
        body = response.json()
        assert body["meta"] == {"page": 1, "perPage": 20, "totalPages": 1, "total": 4}
        assert [row["documentId"] for row in body["data"]] == ["doc-1", "doc-3", "doc-2", "doc-4"]
        assert set(body["data"][0]) == {
            "documentId",
            "vendor",
            "date",
            "invoiceNumber",
            "amount",
            "status",
        }

    def test_statuses(self, client: TestClient):
        rows = client.get("/invoices").json()["data"]
        assert {row["documentId"]: row["status"] for row in rows} == {
            "doc-1": "Due",
            "doc-2": "Paid",
            "doc-3": "Overdue",
            "doc-4": "processing",
        }

    def test_search(self, client: TestClient):
        body = client.get("/invoices", params={"search": "acme"}).json()
        assert body["meta"]["total"] == 2
        assert {row["vendor"] for row in body["data"]} == {"Acme GmbH"}

    def test_search_by_invoice_number(self, client: TestClient):
        body = client.get("/invoices", params={"search": "INV-002"}).json()
        assert [row["documentId"] for row in body["data"]] == ["doc-2"]

    def test_sort_by_vendor(self, client: TestClient):
        body = client.get("/invoices", params={"sortBy": "vendor", "order": "asc"}).json()
        assert [row["vendor"] for row in body["data"]] == [
            "Acme GmbH",
            "Acme GmbH",
            "Beta Supplies",
            "Gamma Ltd",
        ]

    def test_unknown_sort_falls_back_to_invoice_date(self, client: TestClient):
        default = client.get("/invoices").json()["data"]
        hostile = client.get(
            "/invoices", params={"sortBy": "total_amount; DROP TABLE invoices"}
        ).json()["data"]
        assert hostile == default

    def test_pages_are_disjoint(self, client: TestClient):
        first = client.get("/invoices", params={"page": "1", "perPage": "2"}).json()
        second = client.get("/invoices", params={"page": "2", "perPage": "2"}).json()

        assert first["meta"]["totalPages"] == 2
        first_ids = {row["documentId"] for row in first["data"]}
        second_ids = {row["documentId"] for row in second["data"]}
        assert first_ids.isdisjoint(second_ids)
        assert first_ids | second_ids == {"doc-1", "doc-2", "doc-3", "doc-4"}

    def test_paging_values_are_clamped(self, client: TestClient):
        body = client.get("/invoices", params={"page": "-3", "perPage": "1000"}).json()
        assert body["meta"]["page"] == 1
        assert body["meta"]["perPage"] == 100

    def test_non_numeric_paging_uses_defaults(self, client: TestClient):
        response = client.get("/invoices", params={"page": "abc", "perPage": "lots"})
        assert response.status_code == 200
        assert response.json()["meta"]["perPage"] == 20

    def test_page_past_end_is_empty(self, client: TestClient):
        body = client.get("/invoices", params={"page": "9"}).json()
        assert body["data"] == []
        assert body["meta"]["total"] == 4

    def test_huge_page_is_empty_not_an_error(self, client: TestClient):
        response = client.get("/invoices", params={"page": "99999999999999999999"})

        assert response.status_code == 200
        body = response.json()
        assert body["data"] == []
        assert body["meta"]["total"] == 4


class TestUnicodeSearch:
    @pytest.fixture
    def sample_records(self, sample_records, record_factory):
        return [
            *sample_records,
            record_factory("doc-5", "Müller GmbH", "ÄB-1", date(2024, 2, 1), 75.0),
        ]

    @pytest.mark.parametrize("term", ["MÜLLER", "müller", "äb-1", "ÄB"])
    def test_non_ascii_search_ignores_case(self, client: TestClient, term: str):
        body = client.get("/invoices", params={"search": term}).json()

        assert body["meta"]["total"] == 1
        assert body["data"][0]["documentId"] == "doc-5"
        assert body["data"][0]["vendor"] == "Müller GmbH"
