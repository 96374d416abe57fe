"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, i18n_backend.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from i18n_backend.api.deps.dependencies import get_job_dispatcher
from i18n_backend.boundary.db import create_tables
from i18n_backend.configs import get_settings
from i18n_backend.observability import configure_logging
from i18n_backend.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)
from i18n_backend.workers.dispatcher import InProcessJobDispatcher

from .routers import health_router, translation_jobs_router, translations_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging()
    logger = logging.getLogger("uvicorn")
    settings = get_settings()

    # Startup
    if settings.database.create_tables_on_startup:
        await create_tables()
    logger.info(
        "Translation job dispatch mode: %s (worker concurrency %d)",
        settings.jobs.dispatch_mode,
        settings.jobs.worker_concurrency,
    )

    yield

    # Shutdown
    dispatcher = get_job_dispatcher()
    if isinstance(dispatcher, InProcessJobDispatcher):
        await dispatcher.shutdown()
        logger.info("In-process translation jobs drained")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Translation Jobs API",
        description="LLM-backed bulk translation jobs over a shared translation store",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(translation_jobs_router, prefix="/api/v1")
    app.include_router(translations_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "i18n_backend.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
