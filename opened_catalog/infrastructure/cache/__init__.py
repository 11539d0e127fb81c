# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis access for the resource ratings namespace.

Example:
    from opened_catalog.infrastructure.cache import init_redis, get_redis

    await init_redis(settings)
    redis = get_redis()
    cursor, keys = await redis.scan_page(0, "resource:*", 10)
    await close_redis()
"""

from opened_catalog.infrastructure.cache.redis_client import (
    RedisClient,
    RedisError,
    close_redis,
    get_redis,
    init_redis,
)

__all__ = [
    "RedisClient",
    "RedisError",
    "close_redis",
    "get_redis",
    "init_redis",
]
