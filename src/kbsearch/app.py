"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from kbsearch import __version__
from kbsearch.analytics import AnalyticsRecorder
from kbsearch.config import Settings
from kbsearch.corpus import CorpusStore, load_seed
from kbsearch.handlers import register_exception_handlers
from kbsearch.middleware.auth import APIKeyMiddleware
from kbsearch.middleware.cors import configure_cors
from kbsearch.middleware.logging import RequestLoggingMiddleware
from kbsearch.routes import analytics, articles, categories, health, search
from kbsearch.search import SearchEngine

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Seeds the corpus store and attaches it, the search engine and the
    analytics recorder to app state. A seed that cannot be loaded aborts
    startup.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info("api_startup", host=settings.host, port=settings.port)

    store = CorpusStore.from_seed(load_seed(settings.seed_path))
    app.state.store = store
    app.state.engine = SearchEngine(store, snippet_length=settings.snippet_length)
    app.state.analytics = AnalyticsRecorder(
        max_batch=settings.analytics_max_batch,
        max_days=settings.analytics_max_days,
        max_events=settings.analytics_max_events,
    )

    try:
        yield
    finally:
        logger.info("api_shutdown", article_count=len(store))


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Knowledge Article Search API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    if settings.key:
        app.add_middleware(APIKeyMiddleware, api_key=settings.key)
    app.add_middleware(RequestLoggingMiddleware)
    configure_cors(app, settings.cors_origins)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(articles.router, prefix="/api/v1")
    app.include_router(categories.router, prefix="/api/v1")
    app.include_router(analytics.router, prefix="/api/v1")

    return app
