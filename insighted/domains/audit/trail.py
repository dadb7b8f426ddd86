# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Append-only audit trail for school profiles.

Every write to a school profile appends exactly one HistoryEntry to the
profile's ``history_log`` JSON array. The append runs inside the caller's
transaction, after its precondition checks and before commit, so a failed
mutation never leaves an orphan entry and an entry never exists without its
mutation.

The append is a single storage-native operation where the dialect has one:

- PostgreSQL: ``history_log || '[entry]'::jsonb``
- SQLite: ``json_insert(history_log, '$[#]', json(entry))``

Other dialects lock the row with ``SELECT ... FOR UPDATE`` and write the
extended array back. After every append the log is re-read and the new
entry's ``entry_id`` must be present.

Example:
    >>> trail = AuditTrail(client.dialect_name)
    >>> async with client.transaction() as session:
    ...     await session.execute(update(SchoolProfile).where(...).values(...))
    ...     await trail.append(session, "100001", "user-42", "Enrolment Update")
"""

import json
import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import func, literal, literal_column, select, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from insighted.infrastructure.database.models import SchoolProfile
from insighted.utils.datetime import format_iso, parse_iso, utc_now

logger = logging.getLogger(__name__)

NATIVE_APPEND_DIALECTS = frozenset({"postgresql", "sqlite"})


class AuditIntegrityError(Exception):
    """Raised when an appended history entry cannot be read back."""

    pass


def _parse_timestamp(value: Any, entry_id: Any = None) -> datetime | None:
    """Parse a stored entry timestamp; unreadable values become None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        logger.warning("Ignoring non-string history timestamp %r (entry %s)", value, entry_id)
        return None
    try:
        return parse_iso(value)
    except ValueError:
        logger.warning("Ignoring unreadable history timestamp %r (entry %s)", value, entry_id)
        return None


@dataclass(frozen=True)
class HistoryEntry:
    """One immutable audit record in a profile's history log.

    Attributes:
        entry_id: Random identifier used to confirm the append.
        timestamp: When the entry was created (UTC). None for stored
            entries whose timestamp is missing or unreadable.
        submitter: Opaque identity of the submitting user.
        action: Action label, e.g. "Profile Update".
        detail: Short human-readable summary of what changed.
    """

    submitter: str
    action: str
    detail: str | None = None
    entry_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime | None = field(default_factory=utc_now)

    def to_json(self) -> dict[str, Any]:
        """JSON object stored in the history log."""
        data: dict[str, Any] = {
            "entry_id": self.entry_id,
            "timestamp": format_iso(self.timestamp),
            "submitter": self.submitter,
            "action": self.action,
        }
        if self.detail is not None:
            data["detail"] = self.detail
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "HistoryEntry":
        """Parse a stored history log item.

        Entries written before ``entry_id`` and ``submitter`` existed carry
        the submitter under ``user`` and no id. A missing or unreadable
        timestamp is kept as None rather than replaced.
        """
        return cls(
            entry_id=str(data.get("entry_id") or ""),
            timestamp=_parse_timestamp(data.get("timestamp"), data.get("entry_id")),
            submitter=str(data.get("submitter") or data.get("user") or ""),
            action=str(data.get("action") or ""),
            detail=data.get("detail"),
        )


def parse_history(raw: list[Mapping[str, Any]] | None) -> tuple[HistoryEntry, ...]:
    """Parse a stored history log in its stored (chronological) order.

    Items that are not JSON objects are skipped with a warning.
    """
    entries = []
    for item in raw or ():
        if not isinstance(item, Mapping):
            logger.warning("Skipping malformed history item %r", item)
            continue
        entries.append(HistoryEntry.from_json(item))
    return tuple(entries)


class AuditTrail:
    """Appends history entries to ``school_profiles.history_log``.

    Attributes:
        dialect_name: SQL dialect of the bound database.
    """

    def __init__(self, dialect_name: str) -> None:
        self.dialect_name = dialect_name

    @property
    def is_native(self) -> bool:
        """Whether the dialect appends in a single SQL expression."""
        return self.dialect_name in NATIVE_APPEND_DIALECTS

    def appended_log(self, entry: HistoryEntry) -> ColumnElement[Any]:
        """SQL expression for the current log with ``entry`` appended.

        Usable as a SET value in ``UPDATE`` and ``ON CONFLICT DO UPDATE``
        statements, where the column refers to the existing row.

        Raises:
            NotImplementedError: For dialects without a native append.
        """
        column = SchoolProfile.history_log
        payload = entry.to_json()

        if self.dialect_name == "postgresql":
            current = func.coalesce(column, literal([], JSONB))
            return current.op("||", return_type=JSONB)(literal([payload], JSONB))

        if self.dialect_name == "sqlite":
            current = func.coalesce(column, literal_column("'[]'"))
            return func.json_insert(current, "$[#]", func.json(literal(json.dumps(payload))))

        raise NotImplementedError(f"No native JSON append for dialect {self.dialect_name!r}")

    async def append(
        self,
        session: AsyncSession,
        school_id: str,
        submitter: str,
        action: str,
        detail: str | None = None,
    ) -> HistoryEntry:
        """Append one entry to an existing profile's history log.

        Args:
            session: Session of the surrounding transaction.
            school_id: Profile key.
            submitter: Opaque submitter identity.
            action: Action label.
            detail: Optional change summary.

        Returns:
            The appended entry.

        Raises:
            AuditIntegrityError: If the profile row is gone or the entry
                cannot be read back.
        """
        entry = HistoryEntry(submitter=submitter, action=action, detail=detail)

        if self.is_native:
            new_log: Any = self.appended_log(entry)
        else:
            result = await session.execute(
                select(SchoolProfile.history_log)
                .where(SchoolProfile.school_id == school_id)
                .with_for_update()
            )
            current = result.scalar_one_or_none()
            new_log = [*(current or []), entry.to_json()]

        result = await session.execute(
            update(SchoolProfile)
            .where(SchoolProfile.school_id == school_id)
            .values(history_log=new_log)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise AuditIntegrityError(f"History append for {school_id} touched {result.rowcount} rows")

        await self.verify(session, school_id, entry)
        return entry

    async def verify(self, session: AsyncSession, school_id: str, entry: HistoryEntry) -> None:
        """Confirm that ``entry`` is present in the stored log.

        Raises:
            AuditIntegrityError: If the entry is missing.
        """
        result = await session.execute(
            select(SchoolProfile.history_log).where(SchoolProfile.school_id == school_id)
        )
        log = result.scalar_one_or_none() or []
        if not any(
            isinstance(item, Mapping) and item.get("entry_id") == entry.entry_id for item in log
        ):
            logger.error(
                "History entry %s missing from log of %s after append",
                entry.entry_id,
                school_id,
            )
            raise AuditIntegrityError(f"History entry was not recorded for school {school_id}")

        logger.debug(
            "History entry appended: school_id=%s, action=%s, position=%d",
            school_id,
            entry.action,
            len(log),
        )
