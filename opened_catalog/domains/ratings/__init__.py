# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resource ratings export.

This package provides:
- KeyspaceCursor: cursor-paginated SCAN as an async iterator
- RatingsAggregator: one report row per scanned key, labels fail open
- RatingsExportService: scan, aggregate and upload one report per run
"""

from opened_catalog.domains.ratings.aggregator import ExportState, RatingsAggregator
from opened_catalog.domains.ratings.cursor import SCAN_START, KeyspaceCursor
from opened_catalog.domains.ratings.exceptions import (
    CursorConsumedError,
    RatingsExportError,
    ReportBufferClosedError,
    ScanError,
)
from opened_catalog.domains.ratings.export import (
    ExportResult,
    RatingsExportService,
    report_name,
)
from opened_catalog.domains.ratings.report import ReportBuffer, ReportRow, ResourceRef

__all__ = [
    # Cursor
    "KeyspaceCursor",
    "SCAN_START",
    # Aggregation
    "RatingsAggregator",
    "ExportState",
    "ReportBuffer",
    "ReportRow",
    "ResourceRef",
    # Export
    "RatingsExportService",
    "ExportResult",
    "report_name",
    # Errors
    "RatingsExportError",
    "ScanError",
    "CursorConsumedError",
    "ReportBufferClosedError",
]
