# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ratings aggregation over a scanned keyspace.

The aggregator drives a KeyspaceCursor to completion and turns every
delivered key into one report row:

1. Extract the resource id from the key's numeric suffix
2. Read the rating hash (standard id -> rating)
3. Resolve the resource share URL and each standard title

Lookups are batched per SCAN page: one pipelined hash read, one resource
label query and one standard label query per page.

Label resolution fails open per item. When a batched query fails, each
id on the page is looked up on its own, so a failed or empty lookup
leaves only its own field empty. The row is still emitted and counted,
so the number of rows always equals the number of keys the scan
delivered. Scan failures are not absorbed: they end the run.
"""

import enum
import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from typing import Protocol

from opened_catalog.domains.catalog.store import (
    ResourceLabel,
    RetrievalError,
    StandardLabel,
)
from opened_catalog.domains.ratings.cursor import KeyspaceCursor
from opened_catalog.domains.ratings.exceptions import ScanError
from opened_catalog.domains.ratings.report import ReportBuffer, ReportRow, ResourceRef
from opened_catalog.infrastructure.cache.redis_client import RedisError

logger = logging.getLogger(__name__)


class ExportState(str, enum.Enum):
    """Lifecycle of one export run."""

    IDLE = "idle"
    SCANNING = "scanning"
    RESOLVING = "resolving"
    EMITTING = "emitting"
    UPLOADING = "uploading"
    DONE = "done"
    FAILED = "failed"


class HashReader(Protocol):
    async def get_hashes(self, keys: list[str]) -> list[dict[str, str] | RedisError]: ...


class LabelResolver(Protocol):
    async def resolve_resource_label(self, resource_id: int) -> ResourceLabel: ...

    async def resolve_standard_label(self, standard_id: int) -> StandardLabel: ...

    async def resolve_resource_labels(
        self, resource_ids: Iterable[int]
    ) -> dict[int, ResourceLabel]: ...

    async def resolve_standard_labels(
        self, standard_ids: Iterable[int]
    ) -> dict[int, StandardLabel]: ...


def _standard_id(field: str) -> int | None:
    try:
        return int(field)
    except ValueError:
        return None


class RatingsAggregator:
    """Accumulates one report row per scanned rating key.

    Attributes:
        buffer: Report buffer receiving the rows.
        state: Current ExportState of the run.
        processed: Number of keys turned into rows so far.
        unresolved: Number of rows with at least one empty label.
    """

    def __init__(
        self,
        client: HashReader,
        store: LabelResolver,
        header: str,
    ) -> None:
        """Initialize the aggregator.

        Args:
            client: Redis client used to read rating hashes.
            store: Label resolver, normally a TaxonomyStore.
            header: First line of the report.
        """
        self._client = client
        self._store = store
        self.buffer = ReportBuffer(header=header)
        self.state = ExportState.IDLE
        self.processed = 0
        self.unresolved = 0

    async def collect(self, cursor: KeyspaceCursor) -> int:
        """Drive the cursor to completion, appending one row per key.

        Args:
            cursor: Fresh keyspace cursor.

        Returns:
            Number of keys processed.

        Raises:
            ScanError: If a scan step fails. Rows collected so far stay
                in the buffer and processed reflects them.
        """
        self.state = ExportState.SCANNING
        try:
            async for keys in cursor.pages():
                self.state = ExportState.RESOLVING
                rows = await self._resolve_page(keys)

                self.state = ExportState.EMITTING
                for row in rows:
                    self.buffer.append(row)
                    self.processed += 1

                self.state = ExportState.SCANNING
        except ScanError:
            self.state = ExportState.FAILED
            raise

        logger.info(
            "Collected %d ratings rows in %d scan steps (%d with unresolved labels)",
            self.processed, cursor.scan_calls, self.unresolved,
        )
        return self.processed

    async def _resolve_page(self, keys: Sequence[str]) -> list[ReportRow]:
        refs = [ResourceRef.from_key(key) for key in keys]
        entries = await self._read_hashes(keys)
        resource_labels = await self._resource_labels(refs)
        standard_labels = await self._standard_labels(entries)

        rows = []
        for ref, entry in zip(refs, entries):
            if ref.id is not None:
                ref = replace(ref, label=resource_labels.get(ref.id, ResourceLabel()).url)

            ratings = tuple(
                (standard_labels.get(_standard_id(field), StandardLabel()).title, rating)
                for field, rating in entry.items()
            )
            row = ReportRow(resource_label=ref.label, ratings=ratings)
            if not ref.label or any(not label for label, _ in ratings):
                self.unresolved += 1
            rows.append(row)
        return rows

    async def _read_hashes(self, keys: Sequence[str]) -> list[dict[str, str]]:
        """Read the rating hash of every key; unreadable hashes become empty."""
        try:
            replies = await self._client.get_hashes(list(keys))
        except RedisError as e:
            logger.warning("Couldn't read ratings for %d keys: %s", len(keys), e)
            return [{} for _ in keys]

        entries = []
        for key, reply in zip(keys, replies):
            if isinstance(reply, Exception):
                logger.warning("Couldn't read ratings for %s: %s", key, reply)
                entries.append({})
            else:
                logger.debug("Resource %s ratings: %s", key, reply)
                entries.append(reply)
        return entries

    async def _resource_labels(self, refs: Sequence[ResourceRef]) -> dict[int, ResourceLabel]:
        ids = sorted({ref.id for ref in refs if ref.id is not None})
        if not ids:
            return {}
        try:
            return await self._store.resolve_resource_labels(ids)
        except RetrievalError as e:
            logger.warning(
                "Batch lookup of %d resource labels failed, retrying each: %s", len(ids), e
            )

        labels = {}
        for resource_id in ids:
            try:
                labels[resource_id] = await self._store.resolve_resource_label(resource_id)
            except RetrievalError as e:
                logger.warning("Leaving label of resource %d empty: %s", resource_id, e)
        return labels

    async def _standard_labels(
        self, entries: Sequence[dict[str, str]]
    ) -> dict[int, StandardLabel]:
        ids = sorted({
            standard_id
            for entry in entries
            for standard_id in map(_standard_id, entry)
            if standard_id is not None
        })
        if not ids:
            return {}
        try:
            return await self._store.resolve_standard_labels(ids)
        except RetrievalError as e:
            logger.warning(
                "Batch lookup of %d standard labels failed, retrying each: %s", len(ids), e
            )

        labels = {}
        for standard_id in ids:
            try:
                labels[standard_id] = await self._store.resolve_standard_label(standard_id)
            except RetrievalError as e:
                logger.warning("Leaving title of standard %d empty: %s", standard_id, e)
        return labels
