"""FastAPI application with lifespan management."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from newsdesk import __version__
from newsdesk.config import Settings, configure_logging, get_settings
from newsdesk.infrastructure import Infrastructure
from newsdesk.search import SearchProvider

from .exception_handlers import setup_exception_handlers

logger = logging.getLogger(__name__)


def _log_settings(settings: Settings) -> None:
    """Log current settings for debugging."""
    logger.info("=" * 60)
    logger.info("newsdesk configuration")
    logger.info("=" * 60)
    logger.info("  Log level: %s", settings.log_level)
    logger.info("  Database: %s", settings.database_path)
    logger.info(
        "  Workers: %d (queue capacity %d)",
        settings.workers,
        settings.queue_capacity,
    )
    logger.info("  Task timeout: %.1fs", settings.task_timeout_seconds)
    logger.info("  Provider:")
    logger.info("    Base URL: %s", settings.newsapi_base_url)
    logger.info("    API key set: %s", bool(settings.newsapi_key))
    logger.info("    Timeout: %.1fs", settings.provider_timeout_seconds)
    logger.info("  Strict scope reads: %s", settings.strict_scope_reads)
    logger.info("=" * 60)


def create_app(
    settings: Settings | None = None,
    provider: SearchProvider | None = None,
) -> FastAPI:
    """Create FastAPI application.

    ``provider`` replaces the NewsAPI adapter built from settings.
    """
    from newsdesk.api.routes import health, search

    app_settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Open the store and start the workers; drain them at shutdown."""
        _log_settings(app_settings)
        app.state.infra = Infrastructure.create(app_settings, provider=provider)
        logger.info("newsdesk ready")
        yield

        logger.info("Shutting down")
        app.state.infra.close()
        del app.state.infra

    app = FastAPI(
        title="newsdesk",
        description="Cache-aside topic search over NewsAPI",
        version=__version__,
        lifespan=lifespan,
    )
    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(search.router, tags=["search"])

    return app


def create_default_app() -> FastAPI:
    """App factory for uvicorn (``--factory``)."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app(settings)
