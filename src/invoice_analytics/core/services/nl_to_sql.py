"""
Natural-language to SQL gateway.

Turns a user question into a single SELECT statement through one
chat-completion call, vets the statement, and runs it on a read-only
connection. Pure service: the LLM provider and SQL executor are injected.
"""

from dataclasses import dataclass, field
from typing import Any

from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import (
    ChatQueryError,
    InvalidQueryError,
    LLMError,
    StorageError,
)
from invoice_analytics.core.interfaces.llm import ILLMProvider
from invoice_analytics.core.interfaces.storage import ISQLExecutor
from invoice_analytics.core.services.sql_safety import ensure_select_only, strip_code_fences

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a data-to-SQL translator for SQLite. Follow all user rules strictly."
)

SCHEMA_DESCRIPTION = """\
1. invoices (i): document_id, invoice_number, invoice_date, delivery_date, document_type, total_amount, total_tax, sub_total, currency, vendor_id, customer_id
2. vendors (v): id, vendor_name, vendor_address, vendor_tax_id, vendor_party_number
3. customers (c): id, customer_name, customer_address, customer_tax_id
4. line_items (li): id, invoice_document_id, line_number, description, quantity, unit_price, total_price, sachkonto, bu_schluessel, vat_rate, vat_amount
5. payment_details (pd): invoice_document_id, due_date, payment_terms, bank_account_number, net_days, discount_percentage, discounted_total
6. documents (d): id, name, status, created_at, processed_at"""

JOIN_RULES = """\
- invoices.vendor_id = vendors.id
- invoices.customer_id = customers.id
- invoices.document_id = documents.id
- line_items.invoice_document_id = invoices.document_id
- payment_details.invoice_document_id = invoices.document_id"""

USER_PROMPT_TEMPLATE = """\
You are an expert SQL data analyst for a SQLite database.
Your task is to write a valid SQL SELECT query to answer the following question:
"{question}"

Use ONLY the following tables and their columns:
{schema}

RULES:
- Use the aliases (i, v, c, li, pd, d) for brevity.
- Dates are stored as ISO-8601 text; use date() and strftime() for date logic.
- Join tables using these foreign keys:
{joins}
- Always output a single valid SQLite SELECT query. Do not include markdown, explanations, or quotes around the SQL.
"""


def build_messages(question: str) -> list[dict[str, str]]:
    """Chat messages asking the model for one SELECT statement."""
    prompt = USER_PROMPT_TEMPLATE.format(
        question=question,
        schema=SCHEMA_DESCRIPTION,
        joins=JOIN_RULES,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


@dataclass
class ChatAnswer:
    """Generated SQL together with the rows it produced."""

    sql: str
    results: list[dict[str, Any]] = field(default_factory=list)


class NLToSQLService:
    """
    Answers questions about the invoice data with generated SQL.

    Flow: validate question -> one LLM call -> strip fences -> safety gate
    -> read-only execution. Nothing is executed when the gate rejects.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        executor: ISQLExecutor,
        temperature: float = 0.3,
        max_tokens: int = 1024,
        error_preview_chars: int = 150,
    ):
        self._llm = llm
        self._executor = executor
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._error_preview_chars = error_preview_chars

    @staticmethod
    def validate_question(question: Any) -> str:
        if not isinstance(question, str) or not question.strip():
            raise InvalidQueryError()
        return question

    async def generate_sql(self, question: str) -> str:
        """Ask the model for SQL and return it with fences removed."""
        response = await self._llm.chat(
            messages=build_messages(question),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        return strip_code_fences(response.text)

    async def answer(self, question: Any) -> ChatAnswer:
        """
        Translate and run a question.

        Raises:
            InvalidQueryError: Question missing, blank, or not a string
            UnsafeSQLError: Generated SQL failed the safety gate
            ChatQueryError: LLM call or SQL execution failed
        """
        question = self.validate_question(question)

        try:
            sql = await self.generate_sql(question)
        except LLMError as e:
            logger.error("chat_sql_generation_failed", error=e.message, code=e.code)
            raise ChatQueryError(e.message, self._error_preview_chars) from e

        logger.info("chat_sql_generated", sql=sql)
        statement = ensure_select_only(sql)

        try:
            results = await self._executor.execute_select(statement)
        except StorageError as e:
            logger.error("chat_sql_execution_failed", sql=sql, error=e.message)
            raise ChatQueryError(e.message, self._error_preview_chars) from e

        logger.info("chat_sql_executed", row_count=len(results))
        return ChatAnswer(sql=sql, results=results)
