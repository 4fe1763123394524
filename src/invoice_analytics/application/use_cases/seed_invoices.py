"""
Seed Invoices Use Case.

Loads a JSON export of extraction records into the invoice schema.
"""

import json
from pathlib import Path
from typing import Any

from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import IngestionError
from invoice_analytics.core.interfaces import IIngestStore, IngestSummary
from invoice_analytics.core.services.ingestion import transform_records

logger = get_logger(__name__)


def read_records(path: Path) -> list[Any]:
    """Read a JSON array of raw records."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise IngestionError(f"Seed file not found: {path}", code="SEED_FILE_NOT_FOUND") from e
    except json.JSONDecodeError as e:
        raise IngestionError(f"Seed file is not valid JSON: {e}", code="SEED_FILE_INVALID") from e

    if not isinstance(data, list):
        raise IngestionError("Seed file must contain a JSON array", code="SEED_FILE_INVALID")
    return data


class SeedInvoicesUseCase:
    """Transform raw records and persist them in one transaction."""

    def __init__(self, store: IIngestStore):
        self._store = store

    async def execute_records(self, records: list[Any], reset: bool = False) -> IngestSummary:
        bundles, skipped = transform_records(records)
        logger.info("seed_records_transformed", records=len(records), bundles=len(bundles), skipped=skipped)

        summary = await self._store.load(bundles, reset=reset)
        summary.skipped = skipped
        return summary

    async def execute(self, path: Path, reset: bool = False) -> IngestSummary:
        logger.info("seed_started", path=str(path), reset=reset)
        return await self.execute_records(read_records(path), reset=reset)
