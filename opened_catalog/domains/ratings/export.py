# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Resource ratings export.

Walks every rating hash in Redis, resolves labels against the catalog and
writes a single report to the configured sink.

The export process:
1. Scan resource:* to completion, one row per delivered key
2. Render the report once the scan is exhausted
3. Upload it under "<grade>-ratings.csv", replacing the previous report

If the scan fails nothing is uploaded and the previous report stays in
place. An upload failure is reported and not retried. In both cases the
error is returned in the ExportResult together with the number of keys
processed; export() does not raise for them.

Example:
    >>> service = RatingsExportService(redis, TaxonomyStore(session), sink, settings.export)
    >>> result = await service.export("K")
    >>> result.processed, result.written
    (1234, True)
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from opened_catalog.core.config.settings import ExportSettings
from opened_catalog.domains.ratings.aggregator import (
    ExportState,
    HashReader,
    LabelResolver,
    RatingsAggregator,
)
from opened_catalog.domains.ratings.cursor import KeyspaceCursor, KeyspaceScanner
from opened_catalog.domains.ratings.exceptions import RatingsExportError, ScanError
from opened_catalog.infrastructure.storage.base import ReportSink, StorageError
from opened_catalog.utils.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class RatingsClient(KeyspaceScanner, HashReader, Protocol):
    """Key-value client able to scan keys and read rating hashes."""


@dataclass
class ExportResult:
    """Result of an export run.

    Attributes:
        report_name: Name the report was (or would have been) stored under.
        processed: Number of scanned keys turned into rows.
        written: Whether the report reached the sink.
        state: Final ExportState.
        scan_calls: Number of completed SCAN steps.
        unresolved: Rows with at least one empty label.
        error: ScanError or StorageError if the run failed.
        started_at: When the run started.
        completed_at: When the run completed.
    """

    report_name: str
    processed: int = 0
    written: bool = False
    state: ExportState = ExportState.IDLE
    scan_calls: int = 0
    unresolved: int = 0
    error: RatingsExportError | StorageError | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.written

    @property
    def duration_seconds(self) -> float | None:
        """Get run duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


def report_name(selector: str, suffix: str) -> str:
    """Build the report name for a run selector, e.g. "K-ratings.csv"."""
    return f"{selector}-{suffix}"


class RatingsExportService:
    """Wires the keyspace cursor, the aggregator and the report sink.

    One export() call is one run: a fresh cursor, a fresh buffer and at
    most one write to the sink. Runs for the same report name are not
    coordinated; the last write wins.
    """

    def __init__(
        self,
        client: RatingsClient,
        store: LabelResolver,
        sink: ReportSink,
        settings: ExportSettings,
    ) -> None:
        """Initialize the export service.

        Args:
            client: Redis client for scanning and reading rating hashes.
            store: Label resolver, normally a TaxonomyStore.
            sink: Destination for the rendered report.
            settings: Export configuration (pattern, page size, naming).
        """
        self._client = client
        self._store = store
        self._sink = sink
        self._settings = settings

    async def export(self, grade: str) -> ExportResult:
        """Run one export.

        Args:
            grade: Run selector used to name the report (e.g. "K", "3").

        Returns:
            ExportResult with the processed count and any error.
        """
        name = report_name(grade, self._settings.report_suffix)
        result = ExportResult(report_name=name, started_at=datetime.now(timezone.utc))
        bind_context(report_name=name)

        try:
            aggregator = RatingsAggregator(
                self._client, self._store, header=self._settings.report_header
            )
            cursor = KeyspaceCursor(
                self._client, self._settings.key_pattern, self._settings.page_size
            )
            logger.info("Ratings export started", pattern=cursor.pattern)

            try:
                await aggregator.collect(cursor)
            except ScanError as e:
                result.error = e
                logger.error(
                    "Ratings export aborted, report not written",
                    processed=aggregator.processed,
                    error=str(e),
                )
            else:
                content = aggregator.buffer.render()
                aggregator.state = ExportState.UPLOADING
                try:
                    await self._sink.put(name, content)
                    result.written = True
                    aggregator.state = ExportState.DONE
                except StorageError as e:
                    aggregator.state = ExportState.FAILED
                    result.error = e
                    logger.error(
                        "Ratings report upload failed",
                        processed=aggregator.processed,
                        error=str(e),
                    )

            result.processed = aggregator.processed
            result.unresolved = aggregator.unresolved
            result.scan_calls = cursor.scan_calls
            result.state = aggregator.state
            result.completed_at = datetime.now(timezone.utc)

            if result.success:
                logger.info(
                    "Ratings export completed",
                    processed=result.processed,
                    scan_calls=result.scan_calls,
                    unresolved=result.unresolved,
                )
            return result
        finally:
            clear_context()
