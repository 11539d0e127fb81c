# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the OpenEd catalog.

Example:
    from opened_catalog.infrastructure.database import (
        init_catalog_database,
        get_catalog_session,
    )

    await init_catalog_database(settings)
    async with get_catalog_session() as session:
        ...
    await close_catalog_database()
"""

from opened_catalog.infrastructure.database.connection import (
    DatabaseError,
    check_catalog_database_connection,
    close_catalog_database,
    get_catalog_session,
    get_catalog_sessionmaker,
    init_catalog_database,
)

__all__ = [
    "DatabaseError",
    "check_catalog_database_connection",
    "close_catalog_database",
    "get_catalog_session",
    "get_catalog_sessionmaker",
    "init_catalog_database",
]
