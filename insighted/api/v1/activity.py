# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed API endpoint.

- GET / - Recent history entries across all profiles, newest first
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from insighted.api.dependencies import get_activity_feed
from insighted.domains.activity.service import ActivityFeed, ActivityItem

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[ActivityItem],
    summary="Recent activity",
    description="Most recent profile history entries, bounded by the configured page size.",
)
async def list_activity(
    limit: Annotated[int | None, Query(ge=1, description="Maximum entries")] = None,
    school_id: Annotated[str | None, Query(description="Restrict to one school")] = None,
    feed: ActivityFeed = Depends(get_activity_feed),
) -> list[ActivityItem]:
    return await feed.recent(limit=limit, school_id=school_id)
