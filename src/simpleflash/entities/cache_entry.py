"""Cache entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached response.

    Owned exclusively by a response cache backend.

    Attributes:
        key: The 64-character hex cache key
        value: The response text as UTF-8 bytes
        inserted_at: Clock reading when the entry was stored (seconds)
    """

    key: str
    value: bytes
    inserted_at: float

    @property
    def size(self) -> int:
        """Bytes accounted against the cache ceiling."""
        return len(self.key) + len(self.value)

    def is_expired(self, now: float, ttl: float) -> bool:
        """Whether the entry is past its retention window at ``now``."""
        return now - self.inserted_at >= ttl
