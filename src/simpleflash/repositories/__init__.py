"""Repository layer for data access.

This layer abstracts external dependencies (Redis, Vertex AI) behind
protocol-based interfaces. This enables:
- Easy swapping of implementations (memory -> Redis, Vertex AI -> fake)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from simpleflash.protocols import ModelClient, ResponseCache

from .cache_factory import build_response_cache
from .memory_cache import MemoryResponseCache
from .redis_cache import RedisResponseCache
from .vertex_client import VertexModelClient

__all__ = [
    "ModelClient",
    "ResponseCache",
    "MemoryResponseCache",
    "RedisResponseCache",
    "VertexModelClient",
    "build_response_cache",
]
