# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests, which run against in-memory fakes
- Integration tests, which need a seeded catalog database and Redis
"""

import os
from collections.abc import Iterable
from typing import Any

import pytest

# Actors must bind to a StubBroker, never to a live Redis broker
os.environ.setdefault("DRAMATIQ_TEST_MODE", "true")

from opened_catalog.domains.catalog.store import (  # noqa: E402
    ResourceLabel,
    RetrievalError,
    StandardLabel,
    TaxonomyDimension,
)
from opened_catalog.infrastructure.cache.redis_client import RedisError  # noqa: E402


# =============================================================================
# Fakes
# =============================================================================


class FakeRatingsRedis:
    """In-memory stand-in for RedisClient.

    Each scan_page call returns the next scripted (cursor, keys) page.
    A page scripted as an Exception is raised as RedisError instead.
    """

    def __init__(
        self,
        pages: list[tuple[int, list[str]] | Exception],
        hashes: dict[str, dict[str, str]] | None = None,
        failing_hashes: Iterable[str] = (),
    ) -> None:
        self.pages = list(pages)
        self.hashes = hashes or {}
        self.failing_hashes = set(failing_hashes)
        self.scan_args: list[tuple[int, str, int]] = []
        self.hash_reads: list[list[str]] = []

    async def scan_page(self, cursor: int, pattern: str, count: int) -> tuple[int, list[str]]:
        self.scan_args.append((cursor, pattern, count))
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise RedisError("scan failed", page)
        return page

    async def get_hashes(self, keys: list[str]) -> list[dict[str, str] | RedisError]:
        self.hash_reads.append(list(keys))
        return [
            RedisError(f"Failed to read hash: {key}")
            if key in self.failing_hashes
            else dict(self.hashes.get(key, {}))
            for key in keys
        ]


class FakeTaxonomyStore:
    """In-memory stand-in for TaxonomyStore.

    Attributes:
        ids: Mapping of (dimension, resource id) to taxonomy ids.
        urls: Resource share URLs by id.
        titles: Standard titles by id.
        failing: Resource ids whose lookups raise RetrievalError.
        fail_labels: Whether every label lookup raises RetrievalError.
        failing_labels: Resource or standard ids whose label lookup raises
            RetrievalError, failing any batch that contains them.
        calls: Number of ids_for calls.
    """

    def __init__(
        self,
        ids: dict[tuple[TaxonomyDimension, int], set[int]] | None = None,
        urls: dict[int, str] | None = None,
        titles: dict[int, str] | None = None,
        failing: Iterable[int] = (),
        fail_labels: bool = False,
        failing_labels: Iterable[int] = (),
    ) -> None:
        self.ids = ids or {}
        self.urls = urls or {}
        self.titles = titles or {}
        self.failing = set(failing)
        self.fail_labels = fail_labels
        self.failing_labels = set(failing_labels)
        self.calls = 0

    async def ids_for(self, dimension: TaxonomyDimension, resource_id: int) -> frozenset[int]:
        self.calls += 1
        if resource_id in self.failing:
            raise RetrievalError(f"Couldn't retrieve {dimension.value} ids", Exception("boom"))
        return frozenset(self.ids.get((dimension, resource_id), set()))

    def _check_labels(self, ids: set[int], what: str) -> None:
        if self.fail_labels or ids & self.failing_labels:
            raise RetrievalError(f"Couldn't retrieve {what} labels")

    async def resolve_resource_label(self, resource_id: int) -> ResourceLabel:
        self._check_labels({resource_id}, "resource")
        return ResourceLabel(url=self.urls.get(resource_id, ""))

    async def resolve_standard_label(self, standard_id: int) -> StandardLabel:
        self._check_labels({standard_id}, "standard")
        return StandardLabel(title=self.titles.get(standard_id, ""))

    async def resolve_resource_labels(self, resource_ids: Iterable[int]) -> dict[int, ResourceLabel]:
        resource_ids = set(resource_ids)
        self._check_labels(resource_ids, "resource")
        return {i: ResourceLabel(url=self.urls[i]) for i in resource_ids if i in self.urls}

    async def resolve_standard_labels(self, standard_ids: Iterable[int]) -> dict[int, StandardLabel]:
        standard_ids = set(standard_ids)
        self._check_labels(standard_ids, "standard")
        return {
            i: StandardLabel(title=self.titles[i]) for i in standard_ids if i in self.titles
        }


class MemorySink:
    """Report sink keeping artifacts in a dict."""

    def __init__(self, error: Exception | None = None) -> None:
        self.artifacts: dict[str, str] = {}
        self.puts: list[str] = []
        self.error = error

    async def put(self, name: str, content: str) -> None:
        self.puts.append(name)
        if self.error is not None:
            raise self.error
        self.artifacts[name] = content


# =============================================================================
# Fake Fixtures
# =============================================================================


@pytest.fixture
def fake_redis_factory():
    """Build a FakeRatingsRedis from scripted pages and hashes."""
    return FakeRatingsRedis


@pytest.fixture
def fake_store_factory():
    """Build a FakeTaxonomyStore from id sets and labels."""
    return FakeTaxonomyStore


@pytest.fixture
def memory_sink() -> MemorySink:
    """Provide an empty in-memory report sink."""
    return MemorySink()


@pytest.fixture
def memory_sink_factory():
    """Build a MemorySink, optionally failing every put."""
    return MemorySink


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def test_environment() -> dict[str, Any]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "CATALOG_DB_HOST": "localhost",
        "CATALOG_DB_PORT": "5432",
        "REDIS_HOST": "localhost",
        "REDIS_PORT": "6379",
        "STORAGE_BACKEND": "local",
        "EXPORT_PAGE_SIZE": "10",
    }


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless RUN_INTEGRATION=1."""
    if os.getenv("RUN_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set RUN_INTEGRATION=1 to run against live services")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
