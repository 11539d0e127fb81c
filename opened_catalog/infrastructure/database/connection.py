# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalog database connection management using SQLAlchemy async.

Uses SQLAlchemy 2.0 async API with the asyncpg driver. The catalog
database is read-only from the point of view of these tools.

Example:
    from opened_catalog.infrastructure.database.connection import (
        init_catalog_database,
        get_catalog_session,
    )

    await init_catalog_database(settings)

    async with get_catalog_session() as session:
        store = TaxonomyStore(session)
"""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

if TYPE_CHECKING:
    from opened_catalog.core.config.settings import Settings

# Module-level state for the catalog database connection
_catalog_engine: Optional[AsyncEngine] = None
_catalog_sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None


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


async def init_catalog_database(settings: "Settings") -> None:
    """Initialize the catalog database connection pool.

    Args:
        settings: Application settings containing database configuration.

    Raises:
        DatabaseError: If connection pool creation fails.
    """
    global _catalog_engine, _catalog_sessionmaker

    try:
        _catalog_engine = create_async_engine(
            settings.catalog_db.url,
            pool_size=settings.catalog_db.pool_size,
            max_overflow=settings.catalog_db.max_overflow,
            pool_pre_ping=True,
            pool_recycle=1800,
            echo=settings.debug,
        )

        _catalog_sessionmaker = async_sessionmaker(
            bind=_catalog_engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to initialize catalog database connection", e) from e


async def close_catalog_database() -> None:
    """Close the catalog database connection pool."""
    global _catalog_engine, _catalog_sessionmaker

    if _catalog_engine is not None:
        await _catalog_engine.dispose()
        _catalog_engine = None
        _catalog_sessionmaker = None


def get_catalog_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the catalog database sessionmaker.

    Raises:
        DatabaseError: If the database has not been initialized.
    """
    if _catalog_sessionmaker is None:
        raise DatabaseError(
            "Catalog database not initialized. Call init_catalog_database() first."
        )
    return _catalog_sessionmaker


@asynccontextmanager
async def get_catalog_session() -> AsyncIterator[AsyncSession]:
    """Get an async session for the catalog database.

    The session is rolled back on exception. Nothing is committed since
    the catalog tools only read.

    Yields:
        AsyncSession for database operations.

    Raises:
        DatabaseError: If the database has not been initialized or
            if a database operation fails.
    """
    sessionmaker = get_catalog_sessionmaker()

    async with sessionmaker() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            raise DatabaseError("Database operation failed", e) from e
        except Exception:
            await session.rollback()
            raise


async def check_catalog_database_connection() -> bool:
    """Check if the catalog database is reachable.

    Returns:
        True if the database is reachable, False otherwise.
    """
    if _catalog_engine is None:
        return False

    try:
        async with _catalog_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
