"""
Main FastAPI application.

This is the entry point for the API server: ``uvicorn taskflow.main:app``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow.core.config import Settings, get_settings
from taskflow.core.logging_setup import configure_logging
from taskflow.db.session import (
    build_engine,
    build_session_maker,
    check_connection,
    create_tables,
)
from taskflow.errors import register_error_handlers
from taskflow.routers import health, task

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The database engine is created when the app starts and disposed when it
    stops, so each app instance owns its own connection pool.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s...", settings.APP_NAME)
        engine = build_engine(settings)
        app.state.engine = engine
        app.state.session_maker = build_session_maker(engine)

        if settings.CREATE_TABLES:
            await create_tables(engine)
        await check_connection(engine)

        yield  # The server runs while we're "yielded" here

        logger.info("Shutting down %s...", settings.APP_NAME)
        await engine.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        description="REST API for creating, filtering and editing tasks",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Include routers (API endpoints)
    app.include_router(health.router, tags=["Health"])
    app.include_router(task.router)

    return app


app = create_app()
