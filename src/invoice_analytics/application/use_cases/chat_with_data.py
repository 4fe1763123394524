"""
Chat With Data Use Case.

Answers a natural-language question by generating and running SQL.
"""

from invoice_analytics.application.dto.requests import ChatWithDataRequest
from invoice_analytics.application.dto.responses import ChatWithDataResponse
from invoice_analytics.config import get_logger
from invoice_analytics.core.exceptions import UnsafeSQLError
from invoice_analytics.core.services.nl_to_sql import NLToSQLService

logger = get_logger(__name__)


class ChatWithDataUseCase:
    """
    Use case for POST /chat-with-data.

    Validation, generation, the safety gate and execution all live in
    NLToSQLService; this layer shapes the response and records rejections.
    """

    def __init__(self, service: NLToSQLService):
        self._service = service

    async def execute(self, request: ChatWithDataRequest) -> ChatWithDataResponse:
        logger.info(
            "chat_with_data_started",
            query_len=len(request.query) if isinstance(request.query, str) else None,
        )

        try:
            answer = await self._service.answer(request.query)
        except UnsafeSQLError as e:
            logger.warning(
                "chat_sql_rejected",
                reason=e.reason,
                sql_preview=e.details.get("sql_preview"),
            )
            raise

        logger.info("chat_with_data_completed", rows=len(answer.results))
        return ChatWithDataResponse(success=True, sql=answer.sql, results=answer.results)
