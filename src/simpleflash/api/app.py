import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from simpleflash import __version__
from simpleflash.api.dependencies import HandlerDep, build_lifespan
from simpleflash.config import settings
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
from simpleflash.services import ClientSession


def create_app(session: ClientSession | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        session: Session to serve. If None, one is built from settings at startup.

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="SimpleFlash API",
        description="Cached Gemini queries on Vertex AI",
        version=__version__,
        lifespan=build_lifespan(session),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "SimpleFlash API",
            "version": __version__,
            "description": "Cached Gemini queries on Vertex AI",
            "endpoints": {
                "query": "/query",
                "tokens": "/tokens",
                "timeout": "/timeout",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/query", response_model=QueryResponse)
    async def query(request: QueryRequest, handler: HandlerDep) -> QueryResponse:
        """Answer a prompt, from the cache when an identical query was seen before."""
        return await handler.query(request)

    @app.post("/tokens", response_model=CountTokensResponse)
    async def count_tokens(request: CountTokensRequest, handler: HandlerDep) -> CountTokensResponse:
        """Count prompt tokens with the remote model (never cached)."""
        return await handler.count_tokens(request)

    @app.get("/timeout", response_model=TimeoutResponse)
    async def get_timeout(handler: HandlerDep) -> TimeoutResponse:
        """Get the current per-request timeout."""
        return await handler.get_timeout()

    @app.put("/timeout", response_model=TimeoutResponse)
    async def set_timeout(request: TimeoutRequest, handler: HandlerDep) -> TimeoutResponse:
        """Change the per-request timeout."""
        return await handler.set_timeout(request)

    @app.get("/stats", response_model=SessionStatsResponse)
    async def get_stats(handler: HandlerDep) -> SessionStatsResponse:
        """Get session and cache statistics."""
        return await handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.DEBUG if settings.verbose else logging.INFO)
    uvicorn.run(
        "simpleflash.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
