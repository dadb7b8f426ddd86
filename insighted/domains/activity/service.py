# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Activity feed across school profile history logs.

Flattens every profile's history log into one timeline, most recent first.
Entries with the same timestamp keep their log order reversed, so the later
append of a profile is listed first. Legacy entries without a readable
timestamp rank below every dated entry, latest log position first.

Only the most recently updated profiles are read: every write refreshes
``updated_at``, so the newest N entries live in the N most recently updated
profiles.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select

from insighted.core.config import Settings, get_settings
from insighted.domains.audit.trail import parse_history
from insighted.infrastructure.database.connection import DatabaseClient
from insighted.infrastructure.database.models import SchoolProfile

logger = logging.getLogger(__name__)

_UNDATED = datetime.min.replace(tzinfo=timezone.utc)


def _rank(timestamp: datetime | None, position: int) -> tuple[bool, datetime, int]:
    """Sort key, highest first: dated before undated, then time, then position."""
    return (timestamp is not None, timestamp or _UNDATED, position)


class ActivityItem(BaseModel):
    """One history entry in the activity feed."""

    model_config = ConfigDict(frozen=True)

    school_id: str
    school_name: str
    entry_id: str
    timestamp: datetime | None
    submitter: str
    action: str
    detail: str | None = None


class ActivityFeed:
    """Read-only feed of recent profile activity.

    Example:
        >>> feed = ActivityFeed(client)
        >>> items = await feed.recent()
        >>> items[0].action
        'Enrolment Update'
    """

    def __init__(self, client: DatabaseClient, settings: Settings | None = None) -> None:
        self._client = client
        self._page_size = (settings or get_settings()).activity.page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    async def recent(
        self,
        limit: int | None = None,
        school_id: str | None = None,
    ) -> list[ActivityItem]:
        """Most recent history entries, newest first.

        Args:
            limit: Maximum number of items; defaults to, and is capped at,
                the configured page size.
            school_id: Restrict the feed to one school.

        Returns:
            Activity items ordered most recent first.

        Raises:
            ValueError: If limit is less than 1.
            DatabaseError: If the storage layer fails.
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        limit = min(limit or self._page_size, self._page_size)

        stmt = select(
            SchoolProfile.school_id,
            SchoolProfile.school_name,
            SchoolProfile.history_log,
        )
        if school_id is not None:
            stmt = stmt.where(SchoolProfile.school_id == school_id)
        stmt = stmt.order_by(
            SchoolProfile.updated_at.desc(), SchoolProfile.school_id.asc()
        ).limit(limit)

        async with self._client.transaction() as session:
            rows = (await session.execute(stmt)).all()

        ranked: list[tuple[tuple[bool, datetime, int], ActivityItem]] = []
        for row_school_id, school_name, history_log in rows:
            for position, entry in enumerate(parse_history(history_log)):
                item = ActivityItem(
                    school_id=row_school_id,
                    school_name=school_name,
                    entry_id=entry.entry_id,
                    timestamp=entry.timestamp,
                    submitter=entry.submitter,
                    action=entry.action,
                    detail=entry.detail,
                )
                ranked.append((_rank(entry.timestamp, position), item))

        ranked.sort(key=lambda ranked_item: ranked_item[0], reverse=True)

        logger.debug("Activity feed: %d entries across %d profiles", len(ranked), len(rows))

        return [item for _, item in ranked[:limit]]
