# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School head table, one row per submitting user."""

from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from insighted.infrastructure.database.models.base import Base, TimestampMixin


class SchoolHead(Base, TimestampMixin):
    """Personnel record of the school head who owns a profile submission."""

    __tablename__ = "school_heads"

    user_uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[str | None] = mapped_column(String(100))
    item_number: Mapped[str | None] = mapped_column(String(64))
    position_title: Mapped[str | None] = mapped_column(String(100))
    date_hired: Mapped[date | None] = mapped_column(Date)

    def __repr__(self) -> str:
        return f"<SchoolHead {self.user_uid} {self.last_name!r}>"
