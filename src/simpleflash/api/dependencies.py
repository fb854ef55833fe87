"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Session and handler stored in app.state during lifespan
    - Dependency function retrieves the handler from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from simpleflash.handlers import QueryHandler
from simpleflash.services import ClientSession

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> QueryHandler:
    """Dependency injection for QueryHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The QueryHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "query_handler", None)
    if handler is None:
        raise RuntimeError("QueryHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(session: ClientSession | None = None):
    """Build the lifespan context manager for the FastAPI app.

    Args:
        session: Session to serve. If None, one is created from settings
                 at startup and closed at shutdown.

    Returns:
        An async context manager factory usable as ``FastAPI(lifespan=...)``
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = session is None
        active = ClientSession.create() if owned else session

        app.state.session = active
        app.state.query_handler = QueryHandler(session=active)
        logger.info("Query service initialized (cache=%s)", "on" if active.cache_enabled else "off")

        yield

        del app.state.query_handler
        del app.state.session
        if owned:
            await active.close()
        logger.info("Query service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[QueryHandler, Depends(get_handler)]
