# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the profile store.

Example:
    from insighted.infrastructure.database import DatabaseClient

    async with DatabaseClient(settings.db.url) as client:
        async with client.transaction() as session:
            ...
"""

from insighted.infrastructure.database.connection import DatabaseClient, DatabaseError

__all__ = [
    "DatabaseClient",
    "DatabaseError",
]
