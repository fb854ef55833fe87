"""Response cache construction from settings."""

import logging

from simpleflash.config import Settings, settings
from simpleflash.errors import CacheUnavailable
from simpleflash.protocols import ResponseCache

from .memory_cache import MemoryResponseCache
from .redis_cache import RedisResponseCache

logger = logging.getLogger(__name__)


def build_response_cache(cfg: Settings | None = None) -> ResponseCache:
    """Build the response cache selected by ``CACHE_BACKEND``.

    Args:
        cfg: Settings to read. Defaults to the global settings.

    Returns:
        An initialized response cache

    Raises:
        CacheUnavailable: If the backend is unknown or fails to initialize
    """
    cfg = cfg or settings
    backend = cfg.cache_backend

    if backend == "memory":
        cache: ResponseCache = MemoryResponseCache(
            ttl=cfg.cache_ttl,
            max_size_bytes=cfg.cache_max_size_bytes,
            verbose=cfg.verbose,
            stats_enabled=cfg.cache_stats,
        )
    elif backend == "redis":
        cache = RedisResponseCache.create(
            url=cfg.redis_url,
            password=cfg.redis_password,
            ttl=cfg.cache_ttl,
            key_prefix=cfg.cache_key_prefix,
        )
    else:
        raise CacheUnavailable(f"Unknown cache backend: {backend!r}")

    logger.info("Response cache ready (backend=%s, ttl=%ss)", backend, cfg.cache_ttl)
    return cache
