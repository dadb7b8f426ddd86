# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the database client opened by the application lifespan
- Get the per-process reference index
- Get service instances
- Read the submitter identity header

Example:
    @router.get("/{school_id}")
    async def get_profile(
        school_id: str,
        store: ProfileStore = Depends(get_profile_store),
    ):
        ...
"""

import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, status

from insighted.core.config import get_settings
from insighted.domains.activity.service import ActivityFeed
from insighted.domains.dashboard.service import DashboardService
from insighted.domains.profile.service import ProfileStore
from insighted.domains.reference.index import ReferenceIndex
from insighted.domains.reference.loader import load_reference_index
from insighted.domains.school_head.service import SchoolHeadService
from insighted.infrastructure.database.connection import DatabaseClient
from insighted.utils.logging import bind_context

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def load_cached_reference_index() -> ReferenceIndex:
    """Load the reference index once per process.

    Failures are not cached, so a missing dataset is retried on the next
    request.

    Raises:
        EmptyReferenceError: If the dataset is missing or empty.
        MissingHeaderError: If the identifier column cannot be resolved.
    """
    settings = get_settings()
    return load_reference_index(settings.reference.csv_path, settings.reference.encoding)


def clear_reference_cache() -> None:
    """Drop the cached reference index so the next request reloads it."""
    load_cached_reference_index.cache_clear()


def get_reference_index() -> ReferenceIndex:
    """Get the reference index for the current process."""
    return load_cached_reference_index()


def get_db_client(request: Request) -> DatabaseClient:
    """Get the database client opened at startup.

    Raises:
        HTTPException: If the database is not available.
    """
    client: DatabaseClient | None = getattr(request.app.state, "db_client", None)
    if client is None or not client.is_connected:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not available",
        )
    return client


def get_profile_store(client: DatabaseClient = Depends(get_db_client)) -> ProfileStore:
    """Get a profile store bound to the application database client."""
    return ProfileStore(client)


def get_activity_feed(client: DatabaseClient = Depends(get_db_client)) -> ActivityFeed:
    """Get the activity feed service."""
    return ActivityFeed(client, get_settings())


def get_dashboard_service(store: ProfileStore = Depends(get_profile_store)) -> DashboardService:
    """Get the dashboard aggregation service."""
    return DashboardService(store)


def get_school_head_service(client: DatabaseClient = Depends(get_db_client)) -> SchoolHeadService:
    """Get the school head service."""
    return SchoolHeadService(client)


def require_submitter(request: Request) -> str:
    """Read the opaque submitter identity from the request headers.

    The identity is supplied by the upstream authentication layer and is only
    stored and logged, never interpreted.

    Raises:
        HTTPException: If the header is missing or blank.
    """
    header = get_settings().api.submitter_header
    submitter = (request.headers.get(header) or "").strip()
    if not submitter:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header} header",
        )
    bind_context(submitter=submitter)
    return submitter
