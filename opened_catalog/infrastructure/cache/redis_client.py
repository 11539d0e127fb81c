# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis client for the resource ratings namespace.

This module provides an async Redis client wrapper exposing the
operations the ratings export needs: one SCAN step at a time and hash
reads, single or pipelined.

Example:
    from opened_catalog.infrastructure.cache import init_redis, get_redis

    await init_redis(settings)

    redis = get_redis()
    cursor, keys = await redis.scan_page(0, "resource:*", 10)
    ratings = await redis.get_hash("resource:42")
"""

from typing import TYPE_CHECKING, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError as BaseRedisError

if TYPE_CHECKING:
    from opened_catalog.core.config.settings import Settings

# Module-level state
_redis_client: Optional["RedisClient"] = None


class RedisError(Exception):
    """Exception raised for Redis operation failures.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying Redis error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        """Initialize the Redis error.

        Args:
            message: Human-readable error description.
            original_error: The underlying exception that caused this error.
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RedisClient:
    """Async Redis client for scanning and reading rating hashes.

    Responses are decoded to str, so keys and hash fields come back as
    text rather than bytes. Bytes that are not valid UTF-8 are replaced
    with U+FFFD instead of failing the read.

    Example:
        client = RedisClient(settings)
        await client.connect()

        cursor, keys = await client.scan_page(0, "resource:*", 10)
        hashes = await client.get_hashes(keys)

        await client.close()
    """

    def __init__(self, settings: "Settings") -> None:
        """Initialize the Redis client.

        Args:
            settings: Application settings containing Redis configuration.
        """
        self._settings = settings
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = None

    async def connect(self) -> None:
        """Create the Redis connection pool.

        Raises:
            RedisError: If connection fails.
        """
        try:
            self._pool = ConnectionPool.from_url(
                self._settings.redis.url,
                max_connections=self._settings.redis.max_connections,
                decode_responses=True,
                encoding_errors="replace",
            )
            self._redis = Redis(connection_pool=self._pool)

            # Verify connection
            await self._redis.ping()
        except BaseRedisError as e:
            raise RedisError("Failed to connect to Redis", e) from e

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    def _ensure_connected(self) -> Redis:
        """Ensure the client is connected.

        Returns:
            The Redis client instance.

        Raises:
            RedisError: If not connected.
        """
        if self._redis is None:
            raise RedisError("Redis client not connected. Call connect() first.")
        return self._redis

    # ========== Keyspace scanning ==========

    async def scan_page(
        self,
        cursor: int,
        pattern: str,
        count: int,
    ) -> tuple[int, list[str]]:
        """Run a single SCAN step.

        Args:
            cursor: Cursor returned by the previous step, 0 to start.
            pattern: Glob-style MATCH pattern.
            count: COUNT hint for the page size.

        Returns:
            Tuple of (next cursor, keys in this page). A next cursor of 0
            means the iteration is complete.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            next_cursor, keys = await redis.scan(cursor=cursor, match=pattern, count=count)
            return int(next_cursor), list(keys)
        except BaseRedisError as e:
            raise RedisError(f"Failed to scan from cursor {cursor}", e) from e

    # ========== Hash operations ==========

    async def get_hash(self, key: str) -> dict[str, str]:
        """Get all fields of a hash.

        Args:
            key: The hash key.

        Returns:
            Mapping of field to value, empty if the key does not exist.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return dict(await redis.hgetall(key))
        except BaseRedisError as e:
            raise RedisError(f"Failed to read hash: {key}", e) from e

    async def get_hashes(self, keys: list[str]) -> list[dict[str, str] | RedisError]:
        """Get all fields of several hashes in one round trip.

        Commands are pipelined without MULTI/EXEC. A failure on one key
        does not fail the others: its slot holds a RedisError instead.

        Args:
            keys: Hash keys, in the order results should be returned.

        Returns:
            One entry per key, either the field mapping or a RedisError.

        Raises:
            RedisError: If the pipeline itself cannot be executed.
        """
        if not keys:
            return []

        redis = self._ensure_connected()
        try:
            async with redis.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.hgetall(key)
                replies = await pipe.execute(raise_on_error=False)
        except BaseRedisError as e:
            raise RedisError(f"Failed to read {len(keys)} hashes", e) from e

        results: list[dict[str, str] | RedisError] = []
        for key, reply in zip(keys, replies):
            if isinstance(reply, Exception):
                results.append(RedisError(f"Failed to read hash: {key}", reply))
            else:
                results.append(dict(reply))
        return results

    # ========== Health check ==========

    async def ping(self) -> bool:
        """Check if Redis is reachable.

        Returns:
            True if Redis responds to ping, False otherwise.
        """
        try:
            redis = self._ensure_connected()
            await redis.ping()
            return True
        except (RedisError, BaseRedisError):
            return False


# ========== Module-level functions ==========


async def init_redis(settings: "Settings") -> None:
    """Initialize the global Redis client.

    Args:
        settings: Application settings containing Redis configuration.

    Raises:
        RedisError: If connection fails.
    """
    global _redis_client

    _redis_client = RedisClient(settings)
    await _redis_client.connect()


async def close_redis() -> None:
    """Close the global Redis client."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None


def get_redis() -> RedisClient:
    """Get the global Redis client.

    Raises:
        RedisError: If Redis has not been initialized.
    """
    if _redis_client is None:
        raise RedisError("Redis not initialized. Call init_redis() first.")
    return _redis_client
