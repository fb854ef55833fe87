"""HTTP handlers for query operations.

Handlers convert between DTOs (API contracts) and session calls.
They handle HTTP concerns like status codes and error translation.
"""

from fastapi import HTTPException, status

from simpleflash.dto import (
    CountTokensRequest,
    CountTokensResponse,
    HealthCheckResponse,
    QueryRequest,
    QueryResponse,
    SessionStatsResponse,
    TimeoutRequest,
    TimeoutResponse,
)
from simpleflash.errors import InferenceFailed, InvalidPayload
from simpleflash.keys import derive_key
from simpleflash.services import ClientSession


def _inference_error(e: InferenceFailed) -> HTTPException:
    if e.timed_out:
        return HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=f"Model request timed out: {e}",
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Model request failed: {e}",
    )


class QueryHandler:
    """HTTP handlers for query operations.

    This handler delegates to ClientSession and handles HTTP-specific
    concerns:
    - Converting DTOs to entities and back
    - Mapping InvalidPayload to 400 and InferenceFailed to 502/504

    Example:
        ```python
        session = ClientSession.create()
        handler = QueryHandler(session=session)

        @app.post("/query", response_model=QueryResponse)
        async def query(request: QueryRequest):
            return await handler.query(request)
        ```
    """

    def __init__(self, session: ClientSession) -> None:
        """Initialize the query handler.

        Args:
            session: The client session (required).
        """
        self._session = session

    async def query(self, request: QueryRequest) -> QueryResponse:
        """Handle POST /query requests.

        Args:
            request: The query request DTO

        Returns:
            QueryResponse with the answer, routed model and cache key

        Raises:
            HTTPException: 400 for malformed inline data, 502/504 for model failures
        """
        query = request.to_entity()
        try:
            text = await self._session.query_model(query)
        except InvalidPayload as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e
        except InferenceFailed as e:
            raise _inference_error(e) from e

        return QueryResponse(
            text=text,
            model=self._session.resolve_model(query),
            cache_key=derive_key(query),
        )

    async def count_tokens(self, request: CountTokensRequest) -> CountTokensResponse:
        """Handle POST /tokens requests.

        Args:
            request: The count tokens request DTO

        Returns:
            CountTokensResponse with the total token count

        Raises:
            HTTPException: 502/504 for model failures
        """
        try:
            total = await self._session.count_tokens(request.prompt, request.model_override)
        except InferenceFailed as e:
            raise _inference_error(e) from e

        return CountTokensResponse(
            prompt=request.prompt,
            model=request.model_override or self._session.text_model,
            total_tokens=total,
        )

    async def get_stats(self) -> SessionStatsResponse:
        """Handle GET /stats requests."""
        return SessionStatsResponse(**self._session.get_stats())

    async def get_timeout(self) -> TimeoutResponse:
        """Handle GET /timeout requests."""
        return TimeoutResponse(seconds=self._session.timeout)

    async def set_timeout(self, request: TimeoutRequest) -> TimeoutResponse:
        """Handle PUT /timeout requests."""
        self._session.set_timeout(request.seconds)
        return TimeoutResponse(seconds=self._session.timeout)

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        return HealthCheckResponse(
            status="healthy",
            cache_enabled=self._session.cache_enabled,
        )
