"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (memory -> Redis, Vertex AI -> test double)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from simpleflash.protocols import ModelClient, ResponseCache

    # Type hints work with any implementation
    cache: ResponseCache = MemoryResponseCache()
    cache: ResponseCache = RedisResponseCache.create()
    ```
"""

from .model_client import ModelClient
from .response_cache import ResponseCache

__all__ = [
    "ModelClient",
    "ResponseCache",
]
