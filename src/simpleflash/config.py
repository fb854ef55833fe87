import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv

load_dotenv()

CACHE_BACKENDS = ("memory", "redis")


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Vertex AI
    project_id: str = os.getenv("PROJECT_ID", "")
    project_location: str = os.getenv("PROJECT_LOCATION", "europe-west4")
    text_model: str = os.getenv("TEXT_MODEL", "gemini-1.5-flash-001")
    multimodal_model: str = os.getenv("MULTIMODAL_MODEL", "gemini-1.0-pro-vision-001")
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "180"))  # 3 minutes
    verbose: bool = _env_bool("VERBOSE")

    # Cache
    cache_enabled: bool = _env_bool("CACHE_ENABLED", "true")
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory").lower()
    cache_ttl: int = int(os.getenv("CACHE_TTL", "86400"))  # 24 hours
    cache_max_size_mb: int = int(os.getenv("CACHE_MAX_SIZE_MB", "256"))
    cache_stats: bool = _env_bool("CACHE_STATS")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "simpleflash")

    # Redis (only used when CACHE_BACKEND=redis)
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = _env_bool("API_RELOAD")

    @property
    def cache_max_size_bytes(self) -> int:
        """Cache ceiling converted from MiB to bytes."""
        return self.cache_max_size_mb * 1024 * 1024

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.request_timeout <= 0:
            raise ValueError(f"REQUEST_TIMEOUT must be positive, got {self.request_timeout}")

        if self.cache_ttl <= 0:
            raise ValueError(f"CACHE_TTL must be positive, got {self.cache_ttl}")

        if self.cache_max_size_mb <= 0:
            raise ValueError(f"CACHE_MAX_SIZE_MB must be positive, got {self.cache_max_size_mb}")

        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, got {self.cache_backend!r}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(url: str | None = None, password: str | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    return redis.from_url(
        url or settings.redis_url,
        password=password or settings.redis_password,
        decode_responses=False,
    )
