# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for catalog database connection helpers."""

import pytest

from opened_catalog.infrastructure.database import (
    DatabaseError,
    check_catalog_database_connection,
    close_catalog_database,
    get_catalog_session,
    get_catalog_sessionmaker,
)


@pytest.fixture(autouse=True)
async def uninitialized_database():
    """Make sure no engine is left over from another test."""
    await close_catalog_database()
    yield


class TestUninitialized:
    """Tests for helpers used before init_catalog_database()."""

    async def test_sessionmaker_requires_init(self):
        with pytest.raises(DatabaseError) as exc_info:
            get_catalog_sessionmaker()

        assert "not initialized" in str(exc_info.value)

    async def test_session_requires_init(self):
        with pytest.raises(DatabaseError):
            async with get_catalog_session():
                pass

    async def test_health_check_false_without_engine(self):
        assert await check_catalog_database_connection() is False


class TestDatabaseError:
    """Tests for error formatting."""

    async def test_str_includes_original_error(self):
        error = DatabaseError("Couldn't retrieve standards", ValueError("bad"))

        assert str(error) == "Couldn't retrieve standards: bad"

    async def test_str_without_original_error(self):
        assert str(DatabaseError("Database operation failed")) == "Database operation failed"
