# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School head service.

Keeps one personnel record per user, keyed by the opaque user identity.
Saving is an upsert: the first save inserts, later saves overwrite every
field. School head records are not part of the profile history log.

Example:
    >>> service = SchoolHeadService(client)
    >>> head = await service.save("user-42", {"lastName": "Santos", "firstName": "Ana"})
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from insighted.domains.school_head.schemas import SchoolHeadFields, SchoolHeadRecord
from insighted.infrastructure.database.connection import (
    UPSERT_INSERTS,
    DatabaseClient,
    DatabaseError,
)
from insighted.infrastructure.database.models import SchoolHead
from insighted.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class SchoolHeadServiceError(Exception):
    """Base exception for school head service errors."""

    pass


class SchoolHeadValidationError(SchoolHeadServiceError):
    """Raised when input is rejected before any write."""

    pass


class SchoolHeadPersistenceError(SchoolHeadServiceError):
    """Raised when the storage layer fails; nothing was written."""

    pass


def _validate_uid(user_uid: str) -> str:
    value = (user_uid or "").strip()
    if not value or len(value) > 128:
        raise SchoolHeadValidationError("User identity must be 1 to 128 characters")
    return value


class SchoolHeadService:
    """Stores school head records keyed by user identity."""

    def __init__(self, client: DatabaseClient) -> None:
        self._client = client

    async def get(self, user_uid: str) -> SchoolHeadRecord | None:
        """Get the school head record of a user, or None if not saved yet."""
        user_uid = _validate_uid(user_uid)
        try:
            async with self._client.transaction() as session:
                head = await self._get_by_uid(session, user_uid)
                return self._to_record(head) if head else None
        except DatabaseError as e:
            raise SchoolHeadPersistenceError(f"Failed to load school head {user_uid}") from e

    async def save(
        self,
        user_uid: str,
        fields: SchoolHeadFields | Mapping[str, Any],
    ) -> SchoolHeadRecord:
        """Insert or overwrite the school head record of a user.

        Args:
            user_uid: Opaque user identity.
            fields: Personnel fields.

        Returns:
            The record as read back after the write.

        Raises:
            SchoolHeadValidationError: If the identity or fields are invalid.
            SchoolHeadPersistenceError: If the write fails.
        """
        user_uid = _validate_uid(user_uid)
        if not isinstance(fields, SchoolHeadFields):
            try:
                fields = SchoolHeadFields.model_validate(fields)
            except ValidationError as e:
                raise SchoolHeadValidationError(str(e)) from e
        values = fields.model_dump()

        try:
            async with self._client.transaction() as session:
                now = utc_now()
                insert = UPSERT_INSERTS.get(self._client.dialect_name)
                if insert is not None:
                    stmt = insert(SchoolHead).values(
                        user_uid=user_uid, **values, created_at=now, updated_at=now
                    )
                    await session.execute(
                        stmt.on_conflict_do_update(
                            index_elements=[SchoolHead.user_uid],
                            set_={**values, "updated_at": now},
                        )
                    )
                else:
                    await self._insert_or_update(session, user_uid, values, now)
                head = await self._get_by_uid(session, user_uid)
        except DatabaseError as e:
            logger.error("School head save failed for %s: %s", user_uid, e)
            raise SchoolHeadPersistenceError(f"Failed to save school head {user_uid}") from e

        logger.info("School head saved: uid=%s", user_uid)
        return self._to_record(head)

    async def _insert_or_update(
        self,
        session: AsyncSession,
        user_uid: str,
        values: dict[str, Any],
        now: datetime,
    ) -> None:
        result = await session.execute(
            select(SchoolHead.user_uid).where(SchoolHead.user_uid == user_uid).with_for_update()
        )
        if result.scalar_one_or_none() is None:
            session.add(SchoolHead(user_uid=user_uid, **values, created_at=now, updated_at=now))
            await session.flush()
            return

        await session.execute(
            update(SchoolHead)
            .where(SchoolHead.user_uid == user_uid)
            .values(**values, updated_at=now)
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    async def _get_by_uid(session: AsyncSession, user_uid: str) -> SchoolHead | None:
        result = await session.execute(
            select(SchoolHead)
            .where(SchoolHead.user_uid == user_uid)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_record(head: SchoolHead) -> SchoolHeadRecord:
        return SchoolHeadRecord(
            user_uid=head.user_uid,
            last_name=head.last_name,
            first_name=head.first_name,
            middle_name=head.middle_name,
            item_number=head.item_number,
            position_title=head.position_title,
            date_hired=head.date_hired,
            created_at=ensure_utc(head.created_at),
            updated_at=ensure_utc(head.updated_at),
        )
