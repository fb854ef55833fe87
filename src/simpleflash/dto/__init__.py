"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import CountTokensRequest, QueryRequest, TimeoutRequest
from .responses import (
    CountTokensResponse,
    HealthCheckResponse,
    QueryResponse,
    SessionStatsResponse,
    TimeoutResponse,
)

__all__ = [
    "QueryRequest",
    "CountTokensRequest",
    "TimeoutRequest",
    "QueryResponse",
    "CountTokensResponse",
    "SessionStatsResponse",
    "TimeoutResponse",
    "HealthCheckResponse",
]
