# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the InsightEd API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from insighted import __version__
from insighted.api.routes import health
from insighted.api.v1 import router as v1_router
from insighted.core.config import get_settings
from insighted.domains.profile.service import ProfilePersistenceError
from insighted.domains.reference.index import ReferenceDataError
from insighted.domains.school_head.service import SchoolHeadPersistenceError
from insighted.infrastructure.database.connection import DatabaseClient, DatabaseError
from insighted.infrastructure.database.migrations.runner import run_migrations
from insighted.utils.logging import bind_context, clear_context, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Opens the profile database client at startup and disposes it at
    shutdown. The reference index is loaded lazily by the first request
    that needs it.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info(
        "Starting InsightEd API: environment=%s, debug=%s",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    client = DatabaseClient.from_settings(settings)
    await client.connect()
    applied = await run_migrations(client.engine)
    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))
    app.state.db_client = client
    logger.info("Profile database client opened (%s)", client.dialect_name)

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    await client.close()
    app.state.db_client = None
    logger.info("Shutting down InsightEd API")


async def _persistence_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable, please retry"},
    )


async def _reference_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Reference data unavailable: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Reference data unavailable, school resolution disabled"},
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="InsightEd API",
        description="School profile submission with audited amendments",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # =========================================================================
    # Exception handlers
    # =========================================================================
    app.add_exception_handler(ProfilePersistenceError, _persistence_error_handler)
    app.add_exception_handler(SchoolHeadPersistenceError, _persistence_error_handler)
    app.add_exception_handler(DatabaseError, _persistence_error_handler)
    app.add_exception_handler(ReferenceDataError, _reference_error_handler)

    # =========================================================================
    # Middleware
    # =========================================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    @app.middleware("http")
    async def reset_log_context(request: Request, call_next):
        clear_context()
        bind_context(method=request.method, path=request.url.path)
        return await call_next(request)

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app
