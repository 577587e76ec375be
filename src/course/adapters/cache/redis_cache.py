"""Redis client factory and the catalog read-through cache.

The cache is an optimization only: read and write failures are logged and
treated as misses so the API keeps answering from the database.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from redis import Redis
from redis.exceptions import RedisError

if TYPE_CHECKING:
    from course.config import RedisConfig

logger = logging.getLogger(__name__)

KEY_PREFIX = "course:catalog"


def make_redis(conf: RedisConfig) -> Redis:
    """Create a Redis client for `conf` (connections are opened lazily)."""
    return Redis.from_url(conf.redis_url(), encoding="utf-8", decode_responses=True)


class CatalogCache:
    """JSON values under ``course:catalog:*`` keys with a fixed TTL."""

    def __init__(self, client: Redis, ttl_seconds: int = 300) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(*parts: str) -> str:
        """Build a namespaced key, e.g. ``course:catalog:courses:DATA``."""
        return ":".join((KEY_PREFIX, *parts))

    def get(self, key: str) -> Any | None:
        """Return the decoded value stored at `key`, or None on miss/failure."""
        try:
            raw = self.client.get(key)
        except RedisError as e:
            logger.warning("cache read failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any) -> None:
        """Store `value` as JSON at `key` with the configured TTL."""
        try:
            self.client.set(key, json.dumps(value), ex=self.ttl_seconds)
        except RedisError as e:
            logger.warning("cache write failed for %s: %s", key, e)

    def invalidate(self) -> int:
        """Drop every ``course:catalog:*`` entry; return how many were removed."""
        pattern = self.key("*")
        try:
            keys = list(self.client.scan_iter(match=pattern))
            removed = self.client.delete(*keys) if keys else 0
        except RedisError as e:
            logger.warning("cache invalidation failed for %s: %s", pattern, e)
            return 0
        logger.debug("dropped %d cache entries under %s", removed, pattern)
        return removed
