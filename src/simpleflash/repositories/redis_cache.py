"""Redis implementation of ResponseCache.

Each response is a plain string key with a server-side expiry, so the
retention window is enforced by Redis itself. The byte ceiling is left
to the server's ``maxmemory`` policy.
"""

import logging

import redis

from simpleflash.config import get_redis_client, settings
from simpleflash.errors import CacheUnavailable

logger = logging.getLogger(__name__)


class RedisResponseCache:
    """Redis-backed response cache.

    This class satisfies the ResponseCache protocol through structural
    typing - no explicit inheritance needed.

    Lookups that fail on the Redis side are reported as misses and writes
    that fail are logged and dropped, so an unreachable server only costs
    extra model calls.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> None:
        """Initialize the Redis response cache.

        Args:
            redis_client: Redis client instance. If None, creates default.
            ttl: Time-to-live for entries in seconds.
            key_prefix: Namespace prepended to every cache key.

        Raises:
            CacheUnavailable: If the server does not answer a ping
        """
        self._client = redis_client or get_redis_client()
        self._ttl = ttl or settings.cache_ttl
        self._prefix = key_prefix or settings.cache_key_prefix

        try:
            self._client.ping()
        except redis.RedisError as e:
            raise CacheUnavailable(f"Redis is not reachable: {e}") from e

    @classmethod
    def create(
        cls,
        url: str | None = None,
        password: str | None = None,
        ttl: int | None = None,
        key_prefix: str | None = None,
    ) -> "RedisResponseCache":
        """Factory method to create RedisResponseCache with defaults.

        Args:
            url: Redis URL. If None, uses settings.
            password: Redis password. If None, uses settings.
            ttl: Entry TTL in seconds. If None, uses settings.
            key_prefix: Key namespace. If None, uses settings.

        Returns:
            Configured RedisResponseCache

        Raises:
            CacheUnavailable: If the URL is invalid or the server is unreachable
        """
        try:
            client = get_redis_client(url, password)
        except ValueError as e:
            raise CacheUnavailable(f"Invalid Redis URL: {e}") from e
        return cls(redis_client=client, ttl=ttl, key_prefix=key_prefix)

    def _name(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    def get(self, key: str) -> bytes | None:
        """Look up a cached response.

        Args:
            key: The derived cache key

        Returns:
            The stored bytes, or None if absent, expired or unreadable
        """
        try:
            value = self._client.get(self._name(key))
        except redis.RedisError as e:
            logger.warning("Redis lookup failed for %s: %s", key, e)
            return None
        if value is None:
            return None
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    def set(self, key: str, value: bytes) -> None:
        """Store a response with the configured expiry.

        Args:
            key: The derived cache key
            value: The response text as bytes
        """
        try:
            self._client.set(self._name(key), value, ex=self._ttl)
        except redis.RedisError as e:
            logger.warning("Redis write failed for %s: %s", key, e)

    def delete(self, key: str) -> bool:
        """Remove a single entry.

        Args:
            key: The derived cache key

        Returns:
            True if deleted, False otherwise
        """
        result: int = self._client.delete(self._name(key))  # type: ignore[assignment]
        return result > 0

    def clear(self) -> int:
        """Remove every entry under the key prefix.

        Returns:
            Number of entries deleted
        """
        count = 0
        for name in self._client.scan_iter(match=f"{self._prefix}:*"):
            if self._client.delete(name):
                count += 1
        return count

    def count_all(self) -> int:
        """Count entries under the key prefix.

        Returns:
            Total number of cached entries
        """
        count = 0
        for _ in self._client.scan_iter(match=f"{self._prefix}:*"):
            count += 1
        return count

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with stats
        """
        return {
            "backend": "redis",
            "key_prefix": self._prefix,
            "total_entries": self.count_all(),
            "ttl": self._ttl,
        }

    def close(self) -> None:
        """Close the Redis connection pool."""
        self._client.close()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
