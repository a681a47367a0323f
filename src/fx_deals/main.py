"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from fx_deals import __version__
from fx_deals.core.config import get_settings
from fx_deals.core.database import create_tables, dispose_engine, init_engine
from fx_deals.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: init engine on startup, dispose on shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)
    init_engine(settings.database_url, echo=False, schema=settings.database_schema)

    # PostgreSQL schemas are managed by Alembic; SQLite dev databases are created in place
    if settings.database_url.startswith("sqlite"):
        await create_tables()

    logger.info(f"FX deals API started ({settings.environment})")

    yield

    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="FX Deals API",
        description="FX deal import with per-record validation, duplicate detection, and independent commits",
        version=__version__,
        lifespan=lifespan,
    )

    # Register exception handlers
    from fx_deals.api.errors import register_error_handlers

    register_error_handlers(app)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"detail": str(exc)},
        )

    @app.get("/health", tags=["health"])
    async def health() -> dict:
        return {"status": "ok"}

    # Register middleware and routers
    from fx_deals.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
