# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Cursor-paginated enumeration of a Redis keyspace.

KeyspaceCursor turns repeated SCAN calls into an async iterator. The
enumeration starts at cursor 0 and ends after the step that returns
cursor 0 again; the keys of that last step are still delivered.

SCAN never omits a key that exists for the whole scan, but it may
return the same key more than once. Keys are passed through as
delivered, duplicates included.

Example:
    >>> cursor = KeyspaceCursor(redis, "resource:*", page_size=10)
    >>> async for key in cursor:
    ...     print(key)
"""

import logging
from collections.abc import AsyncIterator
from typing import Protocol

from opened_catalog.domains.ratings.exceptions import CursorConsumedError, ScanError
from opened_catalog.infrastructure.cache.redis_client import RedisError

logger = logging.getLogger(__name__)

# SCAN starts from and terminates on cursor 0
SCAN_START = 0


class KeyspaceScanner(Protocol):
    """Anything that can run a single SCAN step."""

    async def scan_page(
        self, cursor: int, pattern: str, count: int
    ) -> tuple[int, list[str]]: ...


class KeyspaceCursor:
    """Lazy, finite, non-restartable sequence of keys matching a pattern.

    An instance can be iterated once. Build a new one to scan again; it
    starts from scratch and may observe a different keyspace.

    Attributes:
        pattern: Glob pattern keys must match.
        page_size: COUNT hint for each SCAN step.
        scan_calls: Number of completed SCAN steps.
    """

    def __init__(self, client: KeyspaceScanner, pattern: str, page_size: int = 10) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self._client = client
        self.pattern = pattern
        self.page_size = page_size
        self.scan_calls = 0
        self._started = False

    async def pages(self) -> AsyncIterator[list[str]]:
        """Yield each non-empty page of keys as returned by SCAN.

        Raises:
            CursorConsumedError: If this cursor was already iterated.
            ScanError: If a SCAN step fails. Nothing more is yielded.
        """
        if self._started:
            raise CursorConsumedError(
                f"Cursor over {self.pattern!r} was already consumed; create a new one"
            )
        self._started = True

        cursor = SCAN_START
        while True:
            try:
                cursor, keys = await self._client.scan_page(
                    cursor, self.pattern, self.page_size
                )
            except RedisError as e:
                logger.error(
                    "Scan of %s failed after %d steps: %s", self.pattern, self.scan_calls, e
                )
                raise ScanError(f"Scan of {self.pattern} failed", e) from e

            self.scan_calls += 1
            logger.debug(
                "Scan step %d returned %d keys, next cursor %d",
                self.scan_calls, len(keys), cursor,
            )
            if keys:
                yield keys
            if cursor == SCAN_START:
                return

    async def _keys(self) -> AsyncIterator[str]:
        async for page in self.pages():
            for key in page:
                yield key

    def __aiter__(self) -> AsyncIterator[str]:
        return self._keys()
