# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Declarative base and shared column types for InsightEd models."""

from datetime import datetime

from sqlalchemy import JSON, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from insighted.utils.datetime import utc_now

# JSON array column; native JSONB on PostgreSQL so the history log can be
# appended with the ``||`` operator.
JSONLog = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for all InsightEd tables."""


class TimestampMixin:
    """Adds created_at / updated_at columns.

    ``updated_at`` is written explicitly by the profile store because
    ``ON CONFLICT DO UPDATE`` statements bypass Python-side onupdate hooks.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )
