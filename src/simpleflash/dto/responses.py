"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class QueryResponse(BaseModel):
    """Response DTO for a model query."""

    text: str = Field(..., description="The response text, whitespace-trimmed")
    model: str = Field(..., description="The model the query was routed to")
    cache_key: str = Field(..., description="The derived cache key (64 hex characters)")


class CountTokensResponse(BaseModel):
    """Response DTO for token counting."""

    prompt: str = Field(..., description="The counted prompt")
    model: str = Field(..., description="The model used for counting")
    total_tokens: int = Field(..., description="Total token count", ge=0)


class TimeoutResponse(BaseModel):
    """Response DTO for the request timeout."""

    seconds: float = Field(..., description="Current per-request timeout in seconds", gt=0.0)


class SessionStatsResponse(BaseModel):
    """Response DTO for session statistics."""

    text_model: str = Field(..., description="Model for text-only queries")
    multimodal_model: str = Field(..., description="Model for queries with inline data")
    timeout: float = Field(..., description="Per-request timeout in seconds")
    cache_enabled: bool = Field(..., description="Whether a response cache is active")
    metrics: dict[str, float | int] = Field(
        default_factory=dict,
        description="Query, cache and model call counters",
    )
    cache: dict[str, Any] | None = Field(
        None,
        description="Backend-specific cache statistics (null without a cache)",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy'")
    cache_enabled: bool = Field(..., description="Whether a response cache is active")
