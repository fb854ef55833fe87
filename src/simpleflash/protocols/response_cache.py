"""Response cache protocol.

Defines the interface for any key/value store that holds previously
computed model responses under their derived cache key.

Implementations:
- In-process memory cache with TTL and byte ceiling (default)
- Redis with per-key expiry
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ResponseCache(Protocol):
    """Protocol for response cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Implementations must tolerate concurrent ``get``/``set`` calls and
    resolve collisions on the same key as last-write-wins.
    """

    def get(self, key: str) -> bytes | None:
        """Look up a cached response.

        Args:
            key: The derived cache key

        Returns:
            The stored bytes, or None if absent or expired
        """
        ...

    def set(self, key: str, value: bytes) -> None:
        """Store a response.

        Best effort: a failed write only costs a later cache miss.
        The session logs and ignores anything raised here.

        Args:
            key: The derived cache key
            value: The response text as bytes
        """
        ...

    def delete(self, key: str) -> bool:
        """Remove a single entry.

        Args:
            key: The derived cache key

        Returns:
            True if an entry was removed, False otherwise
        """
        ...

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed
        """
        ...

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...

    def close(self) -> None:
        """Release any resources held by the backend."""
        ...
