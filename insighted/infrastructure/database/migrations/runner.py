# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migration runner.

This module provides programmatic migration execution so the API can bring
its database up to date at startup without the alembic CLI. Revisions are
the same modules the alembic environment uses.

Example:
    from insighted.infrastructure.database.migrations.runner import run_migrations

    applied = await run_migrations(client.engine)
"""

import importlib
import logging
from typing import Callable

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

# Migration files in order (must be maintained manually)
MIGRATIONS = [
    "001_school_profiles",
    "002_project_details",
    "003_school_heads",
]


async def run_migrations(engine: AsyncEngine, target_revision: str | None = None) -> list[str]:
    """Apply pending migrations.

    Args:
        engine: Engine of the profile database.
        target_revision: Optional revision to stop at. If None, runs all
            pending migrations.

    Returns:
        List of applied migration revision IDs.
    """
    await _ensure_version_table(engine)

    current_version = await _get_current_version(engine)
    logger.info("Current migration version: %s", current_version or "None")

    migrations_to_apply = get_pending_migrations(current_version, target_revision)
    if not migrations_to_apply:
        logger.info("No pending migrations")
        return []

    applied = []
    for revision in migrations_to_apply:
        await _apply_migration(engine, revision)
        applied.append(revision)
        logger.info("Applied migration: %s", revision)

    return applied


async def _ensure_version_table(engine: AsyncEngine) -> None:
    """Create alembic_version table if not exists."""
    async with engine.begin() as conn:
        await conn.execute(
            text("""
                CREATE TABLE IF NOT EXISTS alembic_version (
                    version_num VARCHAR(128) NOT NULL,
                    CONSTRAINT alembic_version_pkc PRIMARY KEY (version_num)
                )
            """)
        )


async def _get_current_version(engine: AsyncEngine) -> str | None:
    """Get current migration version from database."""
    async with engine.connect() as conn:
        result = await conn.execute(text("SELECT version_num FROM alembic_version LIMIT 1"))
        row = result.fetchone()
        return row[0] if row else None


def get_pending_migrations(
    current_version: str | None,
    target_revision: str | None = None,
) -> list[str]:
    """Get list of migrations to apply, in order.

    Raises:
        ValueError: If the current or target revision is unknown.
    """
    if current_version is None:
        start_idx = 0
    elif current_version in MIGRATIONS:
        start_idx = MIGRATIONS.index(current_version) + 1
    else:
        raise ValueError(f"Database is at unknown revision {current_version!r}")

    if target_revision is None:
        end_idx = len(MIGRATIONS)
    elif target_revision in MIGRATIONS:
        end_idx = MIGRATIONS.index(target_revision) + 1
    else:
        raise ValueError(f"Unknown target revision {target_revision!r}")

    return MIGRATIONS[start_idx:end_idx]


async def _apply_migration(engine: AsyncEngine, revision: str) -> None:
    """Apply a single migration and record it in alembic_version."""
    module = importlib.import_module(f"insighted.infrastructure.database.migrations.versions.{revision}")
    upgrade_fn: Callable[[], None] = module.upgrade

    async with engine.begin() as conn:
        await conn.run_sync(_run_upgrade_sync, upgrade_fn)

        await conn.execute(text("DELETE FROM alembic_version"))
        await conn.execute(
            text("INSERT INTO alembic_version (version_num) VALUES (:version)"),
            {"version": revision},
        )


def _run_upgrade_sync(connection: Connection, upgrade_fn: Callable[[], None]) -> None:
    """Run an upgrade function with alembic operations bound to ``connection``."""
    from alembic.operations import Operations
    from alembic.runtime.migration import MigrationContext

    context = MigrationContext.configure(connection)
    with Operations.context(context):
        upgrade_fn()
