"""
SQLite implementation of the ingestion writer.

Vendors and customers are deduplicated by name across the batch (and
against rows already in the database); the whole batch is written in one
transaction.
"""

import aiosqlite

from invoice_analytics.config import get_logger
from invoice_analytics.core.entities import Customer, Document, LineItem, PaymentDetail, Vendor
from invoice_analytics.core.exceptions import DatabaseError
from invoice_analytics.core.interfaces import IIngestStore, IngestSummary
from invoice_analytics.core.services.ingestion import IngestBundle
from invoice_analytics.infrastructure.storage.sqlite.connection import ConnectionPool

logger = get_logger(__name__)

# Child tables first so foreign keys hold while clearing
_RESET_ORDER = ("line_items", "payment_details", "invoices", "customers", "vendors", "documents")


class SQLiteIngestStore(IIngestStore):
    """Writes ingestion bundles to the invoice schema."""

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    async def load(self, bundles: list[IngestBundle], reset: bool = False) -> IngestSummary:
        summary = IngestSummary()
        try:
            async with self._pool.transaction() as conn:
                if reset:
                    for table in _RESET_ORDER:
                        await conn.execute(f"DELETE FROM {table}")
                    logger.info("existing_data_cleared")

                vendor_ids = await self._existing_ids(conn, "vendors", "vendor_name")
                customer_ids = await self._existing_ids(conn, "customers", "customer_name")

                for bundle in bundles:
                    vendor_id = vendor_ids.get(bundle.vendor.vendor_name)
                    if vendor_id is None:
                        await self._insert_vendor(conn, bundle.vendor)
                        vendor_id = vendor_ids[bundle.vendor.vendor_name] = bundle.vendor.id
                        summary.vendors += 1

                    customer_id = None
                    if bundle.customer is not None:
                        customer_id = customer_ids.get(bundle.customer.customer_name)
                        if customer_id is None:
                            await self._insert_customer(conn, bundle.customer)
                            customer_id = bundle.customer.id
                            customer_ids[bundle.customer.customer_name] = customer_id
                            summary.customers += 1

                    await self._upsert_document(conn, bundle.document)
                    summary.documents += 1

                    invoice = bundle.invoice.model_copy(
                        update={"vendor_id": vendor_id, "customer_id": customer_id}
                    )
                    await conn.execute(
                        """
                        INSERT INTO invoices (
                            document_id, vendor_id, customer_id, invoice_number,
                            invoice_date, delivery_date, document_type, total_amount,
                            total_tax, sub_total, currency
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(document_id) DO UPDATE SET
                            vendor_id = excluded.vendor_id,
                            customer_id = excluded.customer_id,
                            invoice_number = excluded.invoice_number,
                            invoice_date = excluded.invoice_date,
                            delivery_date = excluded.delivery_date,
                            document_type = excluded.document_type,
                            total_amount = excluded.total_amount,
                            total_tax = excluded.total_tax,
                            sub_total = excluded.sub_total,
                            currency = excluded.currency
                        """,
                        (
                            invoice.document_id,
                            invoice.vendor_id,
                            invoice.customer_id,
                            invoice.invoice_number,
                            invoice.invoice_date.isoformat(),
                            invoice.delivery_date.isoformat() if invoice.delivery_date else None,
                            invoice.document_type,
                            invoice.total_amount,
                            invoice.total_tax,
                            invoice.sub_total,
                            invoice.currency,
                        ),
                    )
                    summary.invoices += 1

                    await conn.execute(
                        "DELETE FROM line_items WHERE invoice_document_id = ?",
                        (invoice.document_id,),
                    )
                    for item in bundle.line_items:
                        await self._insert_line_item(conn, item)
                    summary.line_items += len(bundle.line_items)

                    if bundle.payment_detail is not None:
                        await self._upsert_payment_detail(conn, bundle.payment_detail)
                        summary.payment_details += 1
                    else:
                        await conn.execute(
                            "DELETE FROM payment_details WHERE invoice_document_id = ?",
                            (invoice.document_id,),
                        )

        except aiosqlite.Error as e:
            logger.error("ingest_failed", error=str(e))
            raise DatabaseError("ingest", str(e)) from e

        logger.info(
            "ingest_completed",
            documents=summary.documents,
            invoices=summary.invoices,
            vendors=summary.vendors,
            customers=summary.customers,
            line_items=summary.line_items,
            payment_details=summary.payment_details,
        )
        return summary

    @staticmethod
    async def _existing_ids(conn: aiosqlite.Connection, table: str, name_column: str) -> dict[str, str]:
        cursor = await conn.execute(f"SELECT id, {name_column} FROM {table}")
        return {row[1]: row[0] for row in await cursor.fetchall()}

    @staticmethod
    async def _insert_vendor(conn: aiosqlite.Connection, vendor: Vendor) -> None:
        await conn.execute(
            """
            INSERT INTO vendors (id, vendor_name, vendor_address, vendor_tax_id, vendor_party_number)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                vendor.id,
                vendor.vendor_name,
                vendor.vendor_address,
                vendor.vendor_tax_id,
                vendor.vendor_party_number,
            ),
        )

    @staticmethod
    async def _insert_customer(conn: aiosqlite.Connection, customer: Customer) -> None:
        await conn.execute(
            """
            INSERT INTO customers (id, customer_name, customer_address, customer_tax_id)
            VALUES (?, ?, ?, ?)
            """,
            (customer.id, customer.customer_name, customer.customer_address, customer.customer_tax_id),
        )

    @staticmethod
    async def _upsert_document(conn: aiosqlite.Connection, document: Document) -> None:
        await conn.execute(
            """
            INSERT INTO documents (
                id, name, file_path, file_type, file_size, status, organization_id,
                department_id, uploaded_by_id, created_at, updated_at, processed_at,
                is_validated_by_human, analytics_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                name = excluded.name,
                file_path = excluded.file_path,
                file_type = excluded.file_type,
                file_size = excluded.file_size,
                status = excluded.status,
                updated_at = excluded.updated_at,
                processed_at = excluded.processed_at,
                is_validated_by_human = excluded.is_validated_by_human,
                analytics_id = excluded.analytics_id
            """,
            (
                document.id,
                document.name,
                document.file_path,
                document.file_type,
                document.file_size,
                document.status,
                document.organization_id,
                document.department_id,
                document.uploaded_by_id,
                document.created_at.isoformat(),
                document.updated_at.isoformat(),
                document.processed_at.isoformat() if document.processed_at else None,
                int(document.is_validated_by_human),
                document.analytics_id,
            ),
        )

    @staticmethod
    async def _insert_line_item(conn: aiosqlite.Connection, item: LineItem) -> None:
        await conn.execute(
            """
            INSERT INTO line_items (
                invoice_document_id, line_number, description, quantity, unit_price,
                total_price, sachkonto, bu_schluessel, vat_rate, vat_amount
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                item.invoice_document_id,
                item.line_number,
                item.description,
                item.quantity,
                item.unit_price,
                item.total_price,
                item.sachkonto,
                item.bu_schluessel,
                item.vat_rate,
                item.vat_amount,
            ),
        )

    @staticmethod
    async def _upsert_payment_detail(conn: aiosqlite.Connection, detail: PaymentDetail) -> None:
        await conn.execute(
            """
            INSERT OR REPLACE INTO payment_details (
                invoice_document_id, due_date, payment_terms, bank_account_number, bic,
                account_name, net_days, discount_percentage, discount_days,
                discount_due_date, discounted_total
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                detail.invoice_document_id,
                detail.due_date.isoformat() if detail.due_date else None,
                detail.payment_terms,
                detail.bank_account_number,
                detail.bic,
                detail.account_name,
                detail.net_days,
                detail.discount_percentage,
                detail.discount_days,
                detail.discount_due_date.isoformat() if detail.discount_due_date else None,
                detail.discounted_total,
            ),
        )
