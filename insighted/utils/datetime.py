# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for InsightEd.

All timestamps are stored in UTC and every Python datetime handled by the
profile store and the audit trail is timezone-aware. History entries keep
their timestamps as ISO 8601 strings inside the JSON log, so formatting and
parsing go through the helpers below.

Usage:
    from insighted.utils.datetime import utc_now, format_iso

    entry_timestamp = format_iso(utc_now())
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Get the current UTC calendar date."""
    return utc_now().date()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo (SQLite returns naive values)
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string in UTC, or None if dt is None.
    """
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string into a timezone-aware UTC datetime.

    Accepts the trailing ``Z`` form written by JavaScript clients.

    Args:
        value: ISO 8601 string.

    Returns:
        Timezone-aware UTC datetime, or None if value is empty.

    Raises:
        ValueError: If the string is not a valid ISO 8601 timestamp.
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))
