# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the profile database."""

from insighted.infrastructure.database.models.base import Base, JSONLog, TimestampMixin
from insighted.infrastructure.database.models.school_head import SchoolHead
from insighted.infrastructure.database.models.school_profile import SchoolProfile

__all__ = [
    "Base",
    "JSONLog",
    "TimestampMixin",
    "SchoolHead",
    "SchoolProfile",
]
