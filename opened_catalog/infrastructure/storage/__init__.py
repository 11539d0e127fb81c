# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Report storage backends.

Example:
    from opened_catalog.infrastructure.storage import get_report_sink

    sink = get_report_sink(settings)
    await sink.put("K-ratings.csv", content)
"""

from typing import TYPE_CHECKING

from opened_catalog.infrastructure.storage.base import ReportSink, StorageError
from opened_catalog.infrastructure.storage.local import LocalReportSink
from opened_catalog.infrastructure.storage.s3 import S3ReportSink

if TYPE_CHECKING:
    from opened_catalog.core.config.settings import Settings

__all__ = [
    "LocalReportSink",
    "ReportSink",
    "S3ReportSink",
    "StorageError",
    "get_report_sink",
]


def get_report_sink(settings: "Settings") -> ReportSink:
    """Build the report sink selected by settings.storage.backend."""
    storage = settings.storage

    if storage.backend == "local":
        return LocalReportSink(base_path=storage.local_path)

    return S3ReportSink(
        bucket=storage.bucket,
        endpoint_url=storage.endpoint_url,
        region=storage.region,
        access_key=storage.access_key.get_secret_value() if storage.access_key else None,
        secret_key=storage.secret_key.get_secret_value() if storage.secret_key else None,
    )
