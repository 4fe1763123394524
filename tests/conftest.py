"""Pytest configuration and fixtures."""

import asyncio
from collections.abc import Callable, Generator
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from invoice_analytics.api.main import create_app
from invoice_analytics.application.use_cases import SeedInvoicesUseCase
from invoice_analytics.config import LLMSettings, QuerySettings, Settings, StorageSettings
from invoice_analytics.core.interfaces import HealthStatus, ILLMProvider, LLMResponse
from invoice_analytics.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteIngestStore,
    run_migrations,
)

TODAY = datetime.now(UTC).date()
THIS_YEAR = TODAY.year


def _wrap(value: Any) -> dict[str, Any]:
    return {"value": value}


def make_record(
    doc_id: str,
    vendor: str | None,
    invoice_number: str | None,
    invoice_date: date,
    total: Any,
    status: str = "processed",
    due_date: date | None = None,
    discounted_total: float | None = None,
    line_items: list[dict[str, Any]] | None = None,
    customer: str | None = None,
) -> dict[str, Any]:
    """Build one raw extraction record in the export format."""
    payment: dict[str, Any] = {}
    if due_date is not None:
        payment["dueDate"] = _wrap(due_date.isoformat())
    if discounted_total is not None:
        payment["discountedTotal"] = _wrap(discounted_total)

    items = [
        {
            "srNo": _wrap(index + 1),
            "description": _wrap(item.get("description", f"Item {index + 1}")),
            "totalPrice": _wrap(item["total"]),
            "Sachkonto": _wrap(item.get("sachkonto")),
            "BUSchluessel": _wrap(item.get("bu")),
        }
        for index, item in enumerate(line_items or [])
    ]

    return {
        "_id": {"$oid": doc_id},
        "name": f"{doc_id}.pdf",
        "status": status,
        "organizationId": "org-1",
        "createdAt": {"$date": f"{invoice_date.isoformat()}T08:00:00Z"},
        "extractedData": {
            "llmData": {
                "summary": _wrap({"invoiceTotal": _wrap(total), "currencySymbol": _wrap("EUR")}),
                "invoice": _wrap(
                    {
                        "invoiceId": _wrap(invoice_number),
                        "invoiceDate": _wrap(invoice_date.isoformat()),
                    }
                ),
                "vendor": _wrap({"vendorName": _wrap(vendor)}),
                "customer": _wrap({"customerName": _wrap(customer)}),
                "payment": _wrap(payment),
                "lineItems": _wrap({"items": _wrap(items)}),
            }
        },
    }


@pytest.fixture
def record_factory() -> Callable[..., dict[str, Any]]:
    return make_record


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """
    Four invoices across three vendors.

    doc-1 and doc-3 fall in the current year, doc-2 and doc-4 in the
    previous one.
    """
    return [
        make_record(
            "doc-1",
            "Acme GmbH",
            "INV-001",
            date(THIS_YEAR, 1, 1),
            100.0,
            status="processed",
            due_date=TODAY + timedelta(days=10),
            line_items=[
                {"total": 60.0, "sachkonto": "4400"},
                {"total": 40.0, "sachkonto": 4400},
            ],
            customer="Northwind",
        ),
        make_record(
            "doc-2",
            "Beta Supplies",
            "INV-002",
            date(THIS_YEAR - 1, 12, 15),
            "250.50",
            status="paid",
            due_date=TODAY - timedelta(days=5),
            line_items=[{"total": 250.5, "sachkonto": "", "bu": "9"}],
        ),
        make_record(
            "doc-3",
            "Acme GmbH",
            "INV-003",
            date(THIS_YEAR, 1, 1),
            1000.25,
            status="processed",
            due_date=TODAY - timedelta(days=3),
            line_items=[{"total": 1000.25}],
            customer="Northwind",
        ),
        make_record(
            "doc-4",
            "Gamma Ltd",
            "INV-004",
            date(THIS_YEAR - 1, 6, 1),
            300.0,
            status="processing",
            due_date=TODAY + timedelta(days=10),
            discounted_total=290.0,
            line_items=[{"total": 200.0, "sachkonto": "4400"}],
        ),
    ]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway database."""
    return Settings(
        environment="development",
        llm=LLMSettings(api_key="test-key", max_retries=1),
        storage=StorageSettings(
            data_dir=tmp_path,
            db_name="test.db",
            pool_size=2,
            read_only_pool_size=1,
        ),
        query=QuerySettings(),
    )


async def _seed(settings: Settings, records: list[dict[str, Any]]) -> None:
    await run_migrations(settings.storage.db_path, create_backup_before=False)
    pool = ConnectionPool.from_settings(settings.storage)
    try:
        await SeedInvoicesUseCase(SQLiteIngestStore(pool)).execute_records(records)
    finally:
        await pool.close()


@pytest.fixture
def seeded_db(settings: Settings, sample_records: list[dict[str, Any]]) -> Path:
    """Migrated database loaded with sample_records."""
    asyncio.run(_seed(settings, sample_records))
    return settings.storage.db_path


@pytest.fixture
def mock_llm() -> MagicMock:
    """LLM provider double; chat returns a harmless SELECT by default."""
    llm = MagicMock(spec=ILLMProvider)
    llm.chat.return_value = LLMResponse(
        text="SELECT COUNT(*) AS total FROM invoices",
        model="test-model",
    )
    llm.check_health.return_value = HealthStatus(
        available=True,
        provider="mock",
        model="test-model",
    )
    return llm


@pytest.fixture
def app(settings: Settings, seeded_db: Path, mock_llm: MagicMock):
    return create_app(settings, llm_provider=mock_llm)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Create sync test client with the lifespan running."""
    with TestClient(app) as c:
        yield c
