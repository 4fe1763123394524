"""
Natural-language querying endpoint.
"""

from fastapi import APIRouter, Depends

from invoice_analytics.api.dependencies import get_chat_with_data_use_case
from invoice_analytics.application.dto.requests import ChatWithDataRequest
from invoice_analytics.application.dto.responses import ChatWithDataResponse, ErrorResponse
from invoice_analytics.application.use_cases import ChatWithDataUseCase

router = APIRouter(tags=["chat"])


@router.post(
    "/chat-with-data",
    response_model=ChatWithDataResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing query or unsafe SQL"},
        500: {"model": ErrorResponse, "description": "Query failed"},
    },
)
async def chat_with_data(
    request: ChatWithDataRequest,
    use_case: ChatWithDataUseCase = Depends(get_chat_with_data_use_case),
) -> ChatWithDataResponse:
    """
    Translate a question into a single read-only SELECT and run it.

    Returns the executed SQL together with the result rows.
    """
    return await use_case.execute(request)
