"""
FastAPI application factory.

Creates and configures the application. Serve with:

    uvicorn invoice_analytics.api.main:create_app --factory
"""

import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_analytics.api.middleware import (
    ErrorHandlerMiddleware,
    LoggingMiddleware,
    setup_exception_handlers,
)
from invoice_analytics.api.routes import (
    analytics_router,
    chat_router,
    health_router,
    invoices_router,
)
from invoice_analytics.config import Settings, configure_logging, get_logger, get_settings
from invoice_analytics.core.exceptions import MigrationError
from invoice_analytics.core.interfaces import ILLMProvider
from invoice_analytics.infrastructure.llm import create_llm_provider
from invoice_analytics.infrastructure.storage.sqlite import ConnectionPool, run_migrations

logger = get_logger(__name__)


def _lifespan(settings: Settings, llm_provider: ILLMProvider | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """
        Application lifespan handler.

        Migrates the database, opens both connection pools and builds the
        LLM provider on startup; closes them all on shutdown.
        """
        logger.info(
            "application_starting",
            host=settings.api.host,
            port=settings.api.port,
            db_path=str(settings.storage.db_path),
        )

        results = await run_migrations(settings.storage.db_path)
        failed = next((r for r in results if not r.success), None)
        if failed is not None:
            raise MigrationError(failed.version, failed.error or "unknown error")
        logger.info("database_initialized", applied=len(results))

        pool = ConnectionPool.from_settings(settings.storage)
        read_pool = ConnectionPool.from_settings(settings.storage, read_only=True)
        await pool.initialize()
        await read_pool.initialize()
        logger.info("connection_pools_ready")

        llm = llm_provider or create_llm_provider(settings.llm)

        if settings.llm.warmup_on_start:
            health = await llm.check_health()
            logger.info("llm_provider_ready", healthy=health.available, error=health.error)

        app.state.settings = settings
        app.state.pool = pool
        app.state.read_pool = read_pool
        app.state.llm = llm
        app.state.started_at = time.time()

        logger.info("application_started")

        try:
            yield
        finally:
            logger.info("application_stopping")
            await read_pool.close()
            await pool.close()
            # An injected provider belongs to the caller
            if llm_provider is None:
                await llm.aclose()
            logger.info("application_stopped")

    return lifespan


def create_app(
    settings: Settings | None = None,
    llm_provider: ILLMProvider | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use instead of the environment-derived ones
        llm_provider: Pre-built provider (tests); otherwise one is created
            from ``settings.llm`` at startup

    Returns:
        Configured FastAPI instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Invoice reporting and natural-language querying",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url="/redoc" if settings.api.debug else None,
        lifespan=_lifespan(settings, llm_provider),
    )
    app.state.settings = settings

    # Add middleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # CORS
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials="*" not in settings.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    # Register routers
    app.include_router(health_router)
    app.include_router(analytics_router)
    app.include_router(invoices_router)
    app.include_router(chat_router)

    # Root health endpoint (for k8s/docker health checks)
    @app.get("/health")
    async def root_health() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app
