"""
Health check endpoints.
"""

import time

import aiosqlite
from fastapi import APIRouter, Depends, Request

from invoice_analytics.api.dependencies import get_app_settings, get_llm, get_pool
from invoice_analytics.application.dto.responses import HealthResponse, ProviderHealthResponse
from invoice_analytics.config import Settings, get_logger
from invoice_analytics.core.exceptions import LLMError
from invoice_analytics.core.interfaces import ILLMProvider
from invoice_analytics.infrastructure.storage.sqlite import ConnectionPool

logger = get_logger(__name__)

router = APIRouter(prefix="/api/health", tags=["health"])


def _uptime(request: Request) -> float:
    return time.time() - request.app.state.started_at


@router.get("", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Basic health check.

    Returns service status and uptime.
    """
    return HealthResponse(
        status="healthy",
        version=settings.app_version,
        uptime_seconds=_uptime(request),
    )


@router.get("/llm", response_model=HealthResponse)
async def llm_health(
    request: Request,
    llm: ILLMProvider = Depends(get_llm),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    LLM provider health check.

    Tests LLM connectivity and response time.
    """
    start = time.time()
    try:
        health_result = await llm.check_health()
        llm_status = ProviderHealthResponse(
            name=health_result.provider,
            available=health_result.available,
            latency_ms=(time.time() - start) * 1000,
            error=health_result.error,
        )
    except LLMError as e:
        logger.warning("llm_health_check_failed", error=e.message)
        llm_status = ProviderHealthResponse(
            name=llm.__class__.__name__,
            available=False,
            error=e.message,
        )

    return HealthResponse(
        status="healthy" if llm_status.available else "degraded",
        version=settings.app_version,
        uptime_seconds=_uptime(request),
        llm=llm_status,
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(
    request: Request,
    pool: ConnectionPool = Depends(get_pool),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Database health check.

    Tests SQLite connectivity and response time.
    """
    start = time.time()
    try:
        async with pool.acquire() as conn:
            await conn.execute("SELECT 1")
        db_status = ProviderHealthResponse(
            name="sqlite",
            available=True,
            latency_ms=(time.time() - start) * 1000,
        )
    except aiosqlite.Error as e:
        logger.warning("db_health_check_failed", error=str(e))
        db_status = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if db_status.available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=_uptime(request),
        database=db_status,
    )
