"""SimpleFlash - Gemini on Vertex AI with a content-addressed response cache.

This package provides a layered architecture for cached model queries:

Layers:
    - protocols: Interface contracts (ResponseCache, ModelClient)
    - repositories: Memory and Redis caches, Vertex AI model client
    - services: Query orchestration (ClientSession)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from simpleflash import ClientSession

    session = ClientSession.create(project_id="my-project")
    text = await session.query("Write a haiku about the color of cows.")
    tokens = await session.count_tokens("Write a haiku about the color of cows.")
    ```

For HTTP API:
    ```python
    from simpleflash.api.app import app
    ```
"""

__version__ = "0.1.0"

from simpleflash.config import Settings, get_settings, settings
from simpleflash.entities import CacheEntryEntity, ContentPart, Query
from simpleflash.errors import (
    CacheUnavailable,
    CredentialsUnavailable,
    InferenceFailed,
    InvalidPayload,
    SimpleFlashError,
)
from simpleflash.keys import derive_key
from simpleflash.protocols import ModelClient, ResponseCache
from simpleflash.repositories import (
    MemoryResponseCache,
    RedisResponseCache,
    VertexModelClient,
    build_response_cache,
)
from simpleflash.services import ClientSession

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "settings",
    "get_settings",
    # Errors
    "SimpleFlashError",
    "CredentialsUnavailable",
    "CacheUnavailable",
    "InvalidPayload",
    "InferenceFailed",
    # Keys
    "derive_key",
    # Protocols (interfaces)
    "ModelClient",
    "ResponseCache",
    # Repositories
    "MemoryResponseCache",
    "RedisResponseCache",
    "VertexModelClient",
    "build_response_cache",
    # Services
    "ClientSession",
    # Entities
    "Query",
    "ContentPart",
    "CacheEntryEntity",
]
