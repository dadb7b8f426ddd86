# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile database connection management using SQLAlchemy async.

The storage client is an explicitly constructed resource: the application
creates one DatabaseClient at startup, passes it to the services that need
it and closes it at shutdown. No connection state lives at module level.

Uses SQLAlchemy 2.0 async API with the asyncpg driver in production and
aiosqlite for local development and tests.

Example:
    from insighted.infrastructure.database.connection import DatabaseClient

    client = DatabaseClient.from_settings(settings)
    await client.connect()

    async with client.transaction() as session:
        result = await session.execute(select(SchoolProfile))

    await client.close()
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from insighted.infrastructure.database.models.base import Base

if TYPE_CHECKING:
    from insighted.core.config.settings import Settings

# INSERT constructs that support ON CONFLICT DO UPDATE, by dialect name.
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DatabaseError(Exception):
    """Base exception for database operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or database error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the database error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class DatabaseClient:
    """Owns the async engine and sessionmaker for the profile database.

    Attributes:
        url: Async database URL.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 20,
        echo: bool = False,
    ) -> None:
        """Initialize the client without opening any connection.

        Args:
            url: Async database URL (``postgresql+asyncpg://`` or ``sqlite+aiosqlite://``).
            pool_size: Connection pool size (ignored for SQLite).
            max_overflow: Maximum overflow connections (ignored for SQLite).
            echo: Log every SQL statement.
        """
        self.url = url
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "DatabaseClient":
        """Build a client from application settings."""
        return cls(
            settings.db.url,
            pool_size=settings.db.pool_size,
            max_overflow=settings.db.max_overflow,
            echo=settings.db.echo,
        )

    @property
    def is_connected(self) -> bool:
        """Whether connect() has been called and close() has not."""
        return self._engine is not None

    async def connect(self) -> None:
        """Create the engine and sessionmaker.

        Calling connect() on an already connected client is a no-op.

        Raises:
            DatabaseError: If engine creation fails.
        """
        if self._engine is not None:
            return

        options: dict = {"echo": self._echo}
        if not self.url.startswith("sqlite"):
            options.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_pre_ping=True,
                pool_recycle=1800,
            )

        try:
            self._engine = create_async_engine(self.url, **options)
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        except SQLAlchemyError as e:
            raise DatabaseError("Failed to initialize profile database connection", e) from e

    async def close(self) -> None:
        """Dispose the engine and release every pooled connection."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None

    async def __aenter__(self) -> "DatabaseClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            DatabaseError: If the client has not been connected.
        """
        if self._engine is None:
            raise DatabaseError("Database client not connected. Call connect() first.")
        return self._engine

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect in use (``postgresql``, ``sqlite``, ...)."""
        return self.engine.dialect.name

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Open a session wrapped in a single transaction.

        The session is committed on success and rolled back on any
        exception, so either every statement issued inside the block
        persists or none does.

        Yields:
            AsyncSession for database operations.

        Raises:
            DatabaseError: If the client is not connected or a database
                operation fails.
        """
        if self._sessionmaker is None:
            raise DatabaseError("Database client not connected. Call connect() first.")

        async with self._sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise DatabaseError("Database operation failed", e) from e
            except Exception:
                await session.rollback()
                raise

    async def create_schema(self) -> None:
        """Create all tables that do not exist yet.

        Intended for local development and tests; deployed databases are
        managed by the Alembic migrations.
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def check_connection(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if the database is reachable, False otherwise.
        """
        if self._engine is None:
            return False

        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
