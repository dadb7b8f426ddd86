# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create school_heads table.

Revision ID: 003_school_heads
Revises: 002_project_details
Create Date: 2025-12-08
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "003_school_heads"
down_revision: Union[str, None] = "002_project_details"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the school_heads table."""
    op.create_table(
        "school_heads",
        sa.Column("user_uid", sa.String(128), primary_key=True),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("middle_name", sa.String(100), nullable=True),
        sa.Column("item_number", sa.String(64), nullable=True),
        sa.Column("position_title", sa.String(100), nullable=True),
        sa.Column("date_hired", sa.Date, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    """Drop the school_heads table."""
    op.drop_table("school_heads")
