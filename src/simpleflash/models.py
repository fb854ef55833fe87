import threading
from dataclasses import dataclass, field


@dataclass
class SessionMetrics:
    """Track query and cache counters for a client session.

    Purely observational; nothing in the query path reads these.
    """

    total_queries: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_write_failures: int = 0
    llm_calls: int = 0
    llm_failures: int = 0
    token_counts: int = 0
    total_llm_time_ms: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    @property
    def avg_llm_time_ms(self) -> float:
        """Calculate average remote call time."""
        if self.llm_calls == 0:
            return 0.0
        return self.total_llm_time_ms / self.llm_calls

    def record_hit(self) -> None:
        """Record a cache hit."""
        with self._lock:
            self.total_queries += 1
            self.cache_hits += 1

    def record_miss(self) -> None:
        """Record a cache miss (or a query made without a cache)."""
        with self._lock:
            self.total_queries += 1
            self.cache_misses += 1

    def record_llm_call(self, duration_ms: float) -> None:
        """Record a successful model call."""
        with self._lock:
            self.llm_calls += 1
            self.total_llm_time_ms += duration_ms

    def record_llm_failure(self) -> None:
        with self._lock:
            self.llm_failures += 1

    def record_token_count(self) -> None:
        with self._lock:
            self.token_counts += 1

    def record_cache_write_failure(self) -> None:
        with self._lock:
            self.cache_write_failures += 1

    def to_dict(self) -> dict[str, float | int]:
        """Convert metrics to dictionary."""
        with self._lock:
            return {
                "total_queries": self.total_queries,
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "hit_rate": self.hit_rate,
                "cache_write_failures": self.cache_write_failures,
                "llm_calls": self.llm_calls,
                "llm_failures": self.llm_failures,
                "token_counts": self.token_counts,
                "total_llm_time_ms": self.total_llm_time_ms,
                "avg_llm_time_ms": self.avg_llm_time_ms,
            }
