# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the Redis client wrapper."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import ResponseError

from opened_catalog.core.config.settings import Settings
from opened_catalog.infrastructure.cache.redis_client import (
    RedisClient,
    RedisError,
    close_redis,
    get_redis,
)


@pytest.fixture
def mock_redis():
    """Create a mock redis.asyncio.Redis."""
    redis = AsyncMock()
    pipe = MagicMock()
    pipe.__aenter__.return_value = pipe
    pipe.__aexit__.return_value = False
    pipe.execute = AsyncMock(return_value=[])
    redis.pipeline = MagicMock(return_value=pipe)
    return redis


@pytest.fixture
def client(mock_redis):
    """Create a connected client around the mock."""
    client = RedisClient(Settings())
    client._redis = mock_redis
    return client


class TestConnect:
    """Tests for pool creation."""

    async def test_pool_replaces_undecodable_bytes(self):
        module = "opened_catalog.infrastructure.cache.redis_client"
        with patch(f"{module}.ConnectionPool") as pool_cls, patch(f"{module}.Redis") as redis_cls:
            redis_cls.return_value.ping = AsyncMock(return_value=True)
            client = RedisClient(Settings())

            await client.connect()

        kwargs = pool_cls.from_url.call_args.kwargs
        assert kwargs["decode_responses"] is True
        assert kwargs["encoding_errors"] == "replace"
        redis_cls.return_value.ping.assert_awaited_once()


class TestScanPage:
    """Tests for single SCAN steps."""

    async def test_returns_cursor_and_keys(self, client, mock_redis):
        mock_redis.scan.return_value = (17, ["resource:1", "resource:2"])

        cursor, keys = await client.scan_page(0, "resource:*", 10)

        assert cursor == 17
        assert keys == ["resource:1", "resource:2"]
        mock_redis.scan.assert_awaited_once_with(cursor=0, match="resource:*", count=10)

    async def test_failure_raises_redis_error(self, client, mock_redis):
        mock_redis.scan.side_effect = RedisConnectionError("reset")

        with pytest.raises(RedisError) as exc_info:
            await client.scan_page(17, "resource:*", 10)

        assert "cursor 17" in str(exc_info.value)
        assert isinstance(exc_info.value.original_error, RedisConnectionError)

    async def test_requires_connection(self):
        client = RedisClient(Settings())

        with pytest.raises(RedisError) as exc_info:
            await client.scan_page(0, "resource:*", 10)

        assert "not connected" in str(exc_info.value)


class TestHashes:
    """Tests for hash reads."""

    async def test_get_hash(self, client, mock_redis):
        mock_redis.hgetall.return_value = {"7": "3"}

        assert await client.get_hash("resource:42") == {"7": "3"}

    async def test_get_hashes_pipelines_without_transaction(self, client, mock_redis):
        pipe = mock_redis.pipeline.return_value
        pipe.execute.return_value = [{"7": "3"}, {}]

        results = await client.get_hashes(["resource:42", "resource:43"])

        assert results == [{"7": "3"}, {}]
        mock_redis.pipeline.assert_called_once_with(transaction=False)
        assert [c.args for c in pipe.hgetall.call_args_list] == [
            ("resource:42",),
            ("resource:43",),
        ]
        pipe.execute.assert_awaited_once_with(raise_on_error=False)

    async def test_get_hashes_isolates_failed_key(self, client, mock_redis):
        pipe = mock_redis.pipeline.return_value
        pipe.execute.return_value = [
            ResponseError("WRONGTYPE"),
            {"8": "5"},
        ]

        results = await client.get_hashes(["resource:42", "resource:43"])

        assert isinstance(results[0], RedisError)
        assert "resource:42" in str(results[0])
        assert results[1] == {"8": "5"}

    async def test_get_hashes_pipeline_failure(self, client, mock_redis):
        pipe = mock_redis.pipeline.return_value
        pipe.execute.side_effect = RedisConnectionError("reset")

        with pytest.raises(RedisError):
            await client.get_hashes(["resource:42"])

    async def test_get_hashes_empty(self, client, mock_redis):
        assert await client.get_hashes([]) == []

        mock_redis.pipeline.assert_not_called()


class TestModuleState:
    """Tests for the module-level client."""

    async def test_get_redis_before_init(self):
        await close_redis()

        with pytest.raises(RedisError) as exc_info:
            get_redis()

        assert "not initialized" in str(exc_info.value)

    async def test_ping_false_when_disconnected(self):
        assert await RedisClient(Settings()).ping() is False
