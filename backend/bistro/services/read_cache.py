"""Short-lived Redis cache for configuration reads (settings, table count)."""

import json
import logging

from redis import Redis, RedisError

logger = logging.getLogger(__name__)

_KEY_PREFIX = "cache:bistro"
_MISS = object()


class ReadCache:
    """JSON values under cache:bistro:{name} with a fixed TTL."""

    def __init__(self, redis: Redis, ttl_seconds: int = 60):
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    def _key(self, name: str) -> str:
        return f"{_KEY_PREFIX}:{name}"

    def get(self, name: str, default=_MISS):
        """
        Cached value, or `default` on miss.

        Redis failures are logged and treated as a miss.
        """
        try:
            raw = self.redis.get(self._key(name))
        except RedisError:
            logger.warning("Read cache unavailable for %s", name, exc_info=True)
            return default

        if raw is None:
            return default
        if isinstance(raw, bytes):
            raw = raw.decode()
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return default

    def set(self, name: str, value) -> None:
        try:
            self.redis.setex(self._key(name), self.ttl_seconds, json.dumps(value))
        except RedisError:
            logger.warning("Failed to cache %s", name, exc_info=True)

    def get_or_load(self, name: str, loader):
        """Return cached value or call loader() and cache its result."""
        cached = self.get(name)
        if cached is not _MISS:
            return cached
        value = loader()
        self.set(name, value)
        return value
