# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create school_profiles table.

Revision ID: 001_school_profiles
Revises: None
Create Date: 2025-12-01
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_school_profiles"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENROLMENT_COUNT_COLUMNS = (
    "es_total",
    "jhs_total",
    "shs_total",
    "grand_total",
    "grade_kinder",
    *(f"grade_{n}" for n in range(1, 13)),
    *(
        f"{strand}_{grade}"
        for strand in ("abm", "stem", "humss", "gas", "tvl_ict", "tvl_he", "tvl_ia", "tvl_afa", "arts", "sports")
        for grade in (11, 12)
    ),
)


def upgrade() -> None:
    """Create the school_profiles table."""
    op.create_table(
        "school_profiles",
        sa.Column("school_id", sa.String(6), primary_key=True),
        # Identity / location
        sa.Column("school_name", sa.String(255), nullable=False),
        sa.Column("region", sa.String(255), nullable=True),
        sa.Column("province", sa.String(255), nullable=True),
        sa.Column("municipality", sa.String(255), nullable=True),
        sa.Column("barangay", sa.String(255), nullable=True),
        sa.Column("division", sa.String(255), nullable=True),
        sa.Column("district", sa.String(255), nullable=True),
        sa.Column("legislative_district", sa.String(255), nullable=True),
        sa.Column("mother_school_id", sa.String(32), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("submitted_by", sa.String(128), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "history_log",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        # Enrolment
        sa.Column("curricular_offering", sa.String(100), nullable=True),
        *(sa.Column(name, sa.Integer, nullable=True) for name in ENROLMENT_COUNT_COLUMNS),
        # Project status
        sa.Column("project_status", sa.String(50), nullable=True),
        sa.Column("accomplishment_percentage", sa.Integer, nullable=True),
        sa.Column("status_as_of", sa.Date, nullable=True),
        sa.Column("target_completion_date", sa.Date, nullable=True),
        sa.Column("project_remarks", sa.Text, nullable=True),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        "ix_school_profiles_submitted_by",
        "school_profiles",
        ["submitted_by"],
    )


def downgrade() -> None:
    """Drop the school_profiles table."""
    op.drop_index("ix_school_profiles_submitted_by", table_name="school_profiles")
    op.drop_table("school_profiles")
