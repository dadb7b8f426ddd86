# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""School profile table.

One row per school, keyed by the 6-digit school ID. Identity and location
columns are written by the profile submit; enrolment and project columns are
dependent fields amended later. Every write appends to ``history_log``.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Date, DateTime, Float, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from insighted.infrastructure.database.models.base import Base, JSONLog, TimestampMixin


class SchoolProfile(Base, TimestampMixin):
    """Persisted school profile aggregate."""

    __tablename__ = "school_profiles"

    school_id: Mapped[str] = mapped_column(String(6), primary_key=True)

    # Identity / location (locked after submit)
    school_name: Mapped[str] = mapped_column(String(255), nullable=False)
    region: Mapped[str | None] = mapped_column(String(255))
    province: Mapped[str | None] = mapped_column(String(255))
    municipality: Mapped[str | None] = mapped_column(String(255))
    barangay: Mapped[str | None] = mapped_column(String(255))
    division: Mapped[str | None] = mapped_column(String(255))
    district: Mapped[str | None] = mapped_column(String(255))
    legislative_district: Mapped[str | None] = mapped_column(String(255))
    mother_school_id: Mapped[str | None] = mapped_column(String(32))
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    submitted_by: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    history_log: Mapped[list[dict[str, Any]]] = mapped_column(JSONLog, nullable=False, default=list)

    # Enrolment
    curricular_offering: Mapped[str | None] = mapped_column(String(100))
    es_total: Mapped[int | None] = mapped_column(Integer)
    jhs_total: Mapped[int | None] = mapped_column(Integer)
    shs_total: Mapped[int | None] = mapped_column(Integer)
    grand_total: Mapped[int | None] = mapped_column(Integer)
    grade_kinder: Mapped[int | None] = mapped_column(Integer)
    grade_1: Mapped[int | None] = mapped_column(Integer)
    grade_2: Mapped[int | None] = mapped_column(Integer)
    grade_3: Mapped[int | None] = mapped_column(Integer)
    grade_4: Mapped[int | None] = mapped_column(Integer)
    grade_5: Mapped[int | None] = mapped_column(Integer)
    grade_6: Mapped[int | None] = mapped_column(Integer)
    grade_7: Mapped[int | None] = mapped_column(Integer)
    grade_8: Mapped[int | None] = mapped_column(Integer)
    grade_9: Mapped[int | None] = mapped_column(Integer)
    grade_10: Mapped[int | None] = mapped_column(Integer)
    grade_11: Mapped[int | None] = mapped_column(Integer)
    grade_12: Mapped[int | None] = mapped_column(Integer)

    # Senior high strands
    abm_11: Mapped[int | None] = mapped_column(Integer)
    abm_12: Mapped[int | None] = mapped_column(Integer)
    stem_11: Mapped[int | None] = mapped_column(Integer)
    stem_12: Mapped[int | None] = mapped_column(Integer)
    humss_11: Mapped[int | None] = mapped_column(Integer)
    humss_12: Mapped[int | None] = mapped_column(Integer)
    gas_11: Mapped[int | None] = mapped_column(Integer)
    gas_12: Mapped[int | None] = mapped_column(Integer)
    tvl_ict_11: Mapped[int | None] = mapped_column(Integer)
    tvl_ict_12: Mapped[int | None] = mapped_column(Integer)
    tvl_he_11: Mapped[int | None] = mapped_column(Integer)
    tvl_he_12: Mapped[int | None] = mapped_column(Integer)
    tvl_ia_11: Mapped[int | None] = mapped_column(Integer)
    tvl_ia_12: Mapped[int | None] = mapped_column(Integer)
    tvl_afa_11: Mapped[int | None] = mapped_column(Integer)
    tvl_afa_12: Mapped[int | None] = mapped_column(Integer)
    arts_11: Mapped[int | None] = mapped_column(Integer)
    arts_12: Mapped[int | None] = mapped_column(Integer)
    sports_11: Mapped[int | None] = mapped_column(Integer)
    sports_12: Mapped[int | None] = mapped_column(Integer)

    # Project
    project_name: Mapped[str | None] = mapped_column(String(255))
    contractor_name: Mapped[str | None] = mapped_column(String(255))
    project_allocation: Mapped[Decimal | None] = mapped_column(Numeric(14, 2))
    batch_of_funds: Mapped[str | None] = mapped_column(String(100))
    notice_to_proceed: Mapped[date | None] = mapped_column(Date)
    project_status: Mapped[str | None] = mapped_column(String(50))
    accomplishment_percentage: Mapped[int | None] = mapped_column(Integer)
    status_as_of: Mapped[date | None] = mapped_column(Date)
    target_completion_date: Mapped[date | None] = mapped_column(Date)
    actual_completion_date: Mapped[date | None] = mapped_column(Date)
    project_remarks: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<SchoolProfile {self.school_id} {self.school_name!r}>"
