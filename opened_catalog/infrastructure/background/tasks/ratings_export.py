# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ratings export background task.

Tasks:
    - export_resource_ratings: Export every resource's ratings for a grade

Example:
    >>> from opened_catalog.infrastructure.background.tasks import export_resource_ratings
    >>> export_resource_ratings.send("K")
"""

import logging
from typing import Any

import dramatiq

from opened_catalog.core.config import get_settings
from opened_catalog.core.config.settings import Settings
from opened_catalog.domains.catalog.store import TaxonomyStore
from opened_catalog.domains.ratings.export import ExportResult, RatingsExportService
from opened_catalog.infrastructure.background.broker import Priority, Queues, setup_dramatiq
from opened_catalog.infrastructure.background.tasks.base import run_async
from opened_catalog.infrastructure.cache.redis_client import RedisClient
from opened_catalog.infrastructure.database.connection import (
    close_catalog_database,
    get_catalog_session,
    init_catalog_database,
)
from opened_catalog.infrastructure.storage import get_report_sink
from opened_catalog.utils.logging import setup_logging

setup_dramatiq()

logger = logging.getLogger(__name__)


async def run_ratings_export(settings: Settings, grade: str) -> ExportResult:
    """Open connections, run one export and close them again.

    Raises:
        DatabaseError: If the catalog database cannot be initialized.
        RedisError: If Redis cannot be reached.
    """
    await init_catalog_database(settings)
    redis = RedisClient(settings)
    try:
        await redis.connect()
        async with get_catalog_session() as session:
            service = RatingsExportService(
                redis,
                TaxonomyStore(session),
                get_report_sink(settings),
                settings.export,
            )
            return await service.export(grade)
    finally:
        await redis.close()
        await close_catalog_database()


@dramatiq.actor(
    queue_name=Queues.REPORTS,
    max_retries=0,
    time_limit=3600000,  # 1 hour, the scan walks the whole namespace
    priority=Priority.LOW,
)
def export_resource_ratings(grade: str) -> dict[str, Any]:
    """Export resource ratings to "<grade>-ratings.csv".

    Args:
        grade: Grade selector naming the report (e.g. "K", "3").

    Returns:
        Summary of the run.
    """
    settings = get_settings()
    setup_logging(settings)
    logger.info("Starting ratings export for grade: %s", grade)

    result = run_async(run_ratings_export(settings, grade))

    return {
        "status": "success" if result.success else "failed",
        "report_name": result.report_name,
        "processed": result.processed,
        "written": result.written,
        "scan_calls": result.scan_calls,
        "unresolved": result.unresolved,
        "error": str(result.error) if result.error else None,
    }


def get_ratings_export_actors() -> list:
    """Get all ratings export actors."""
    return [export_resource_ratings]
