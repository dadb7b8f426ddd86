# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Add engineer project detail columns to school_profiles.

Revision ID: 002_project_details
Revises: 001_school_profiles
Create Date: 2025-12-08
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "002_project_details"
down_revision: Union[str, None] = "001_school_profiles"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROJECT_COLUMNS = (
    ("project_name", sa.String(255)),
    ("contractor_name", sa.String(255)),
    ("project_allocation", sa.Numeric(14, 2)),
    ("batch_of_funds", sa.String(100)),
    ("notice_to_proceed", sa.Date()),
    ("actual_completion_date", sa.Date()),
)


def upgrade() -> None:
    """Add the project detail columns."""
    for name, column_type in PROJECT_COLUMNS:
        op.add_column("school_profiles", sa.Column(name, column_type, nullable=True))


def downgrade() -> None:
    """Drop the project detail columns."""
    with op.batch_alter_table("school_profiles") as batch_op:
        for name, _ in reversed(PROJECT_COLUMNS):
            batch_op.drop_column(name)
