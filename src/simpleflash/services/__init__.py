"""Service layer for business logic.

This layer contains the query orchestration. Services depend on
protocols (interfaces), not concrete implementations, making them
testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Vertex AI)

Usage:
    ```python
    from simpleflash.services import ClientSession

    # Using factory method (recommended)
    session = ClientSession.create()
    session = ClientSession.create(enable_cache=False)

    # Or manual creation
    session = ClientSession(model_client=client, cache=cache)
    ```
"""

from .session import DEFAULT_TEMPERATURE, ClientSession

__all__ = [
    "ClientSession",
    "DEFAULT_TEMPERATURE",
]
