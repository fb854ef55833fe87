"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers.
Handlers depend on the session service, not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Cache / Vertex AI)
"""

from .query_handler import QueryHandler

__all__ = [
    "QueryHandler",
]
