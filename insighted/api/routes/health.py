# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides health and readiness endpoints for the API.
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from insighted import __version__
from insighted.core.config import get_settings
from insighted.utils.datetime import utc_now

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    database: bool = Field(description="Whether the profile database is reachable")


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Report overall health and database reachability."""
    client = getattr(request.app.state, "db_client", None)
    database_ok = await client.check_connection() if client is not None else False
    if not database_ok:
        logger.warning("Health check: profile database unreachable")

    return HealthResponse(
        status="healthy" if database_ok else "degraded",
        timestamp=utc_now(),
        version=__version__,
        environment=get_settings().environment,
        uptime_seconds=int(time.time() - _server_start_time),
        database=database_ok,
    )
