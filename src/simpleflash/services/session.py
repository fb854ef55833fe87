"""Client session for cached model queries.

The session is the single long-lived handle a process holds: it owns the
model client, the model identifiers, the request timeout and at most one
response cache, and orchestrates every query through them.
"""

import asyncio
import base64
import binascii
import logging
import time
from datetime import timedelta
from typing import Awaitable, Callable, TypeVar

from simpleflash.config import settings
from simpleflash.entities import ContentPart, Query
from simpleflash.errors import CacheUnavailable, InferenceFailed, InvalidPayload
from simpleflash.keys import derive_key
from simpleflash.models import SessionMetrics
from simpleflash.protocols import ModelClient, ResponseCache
from simpleflash.repositories import VertexModelClient, build_response_cache

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TEMPERATURE = 0.0


def _to_seconds(timeout: float | timedelta) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    return float(timeout)


class ClientSession:
    """Cached query orchestration in front of a remote language model.

    This session depends on PROTOCOLS, not concrete implementations:
    - ModelClient: Vertex AI in production, a counting fake in tests
    - ResponseCache: in-memory or Redis, or None for no caching

    Query flow:
    1. Resolve the model (override, else multimodal if inline data, else text)
    2. Derive the cache key and return a cached answer if there is one
    3. Otherwise call the model within the session timeout
    4. Trim the answer, store it, return it

    Example:
        ```python
        from simpleflash.services import ClientSession

        session = ClientSession.create(project_id="my-project")
        session.set_timeout(10)
        text = await session.query("Write a haiku about the color of cows.")
        ```
    """

    def __init__(
        self,
        model_client: ModelClient,
        text_model: str | None = None,
        multimodal_model: str | None = None,
        cache: ResponseCache | None = None,
        timeout: float | timedelta | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            model_client: Remote model collaborator (required).
            text_model: Model for text-only queries. Defaults to settings.
            multimodal_model: Model for queries with inline data. Defaults to settings.
            cache: Response cache, or None to run without caching.
            timeout: Per-request timeout in seconds. Defaults to settings.
        """
        self._model_client = model_client
        self._text_model = text_model or settings.text_model
        self._multimodal_model = multimodal_model or settings.multimodal_model
        self._cache = cache
        self._timeout = settings.request_timeout
        if timeout is not None:
            self.set_timeout(timeout)
        self._metrics = SessionMetrics()

    @classmethod
    def create(
        cls,
        text_model: str | None = None,
        multimodal_model: str | None = None,
        location: str | None = None,
        project_id: str | None = None,
        enable_cache: bool | None = None,
        *,
        model_client: ModelClient | None = None,
        cache_factory: Callable[[], ResponseCache] = build_response_cache,
        timeout: float | timedelta | None = None,
    ) -> "ClientSession":
        """Factory method to create a ClientSession with sensible defaults.

        Credentials are resolved and the cache is initialized here, once.
        A cache that fails to initialize is logged and the session runs
        without one for its whole lifetime.

        Args:
            text_model: Text model identifier. If None, uses settings.
            multimodal_model: Multimodal model identifier. If None, uses settings.
            location: Vertex AI region. If None, uses settings.
            project_id: Google Cloud project. If None, uses settings.
            enable_cache: Build a response cache. If None, uses settings.
            model_client: Use this client instead of building a Vertex AI one.
            cache_factory: Builds the response cache.
            timeout: Per-request timeout. If None, uses settings.

        Returns:
            Configured ClientSession

        Raises:
            CredentialsUnavailable: If no Google Cloud credentials are available
        """
        if model_client is None:
            model_client = VertexModelClient.create(project_id=project_id, location=location)

        if enable_cache is None:
            enable_cache = settings.cache_enabled

        cache: ResponseCache | None = None
        if enable_cache:
            try:
                cache = cache_factory()
            except CacheUnavailable as e:
                logger.warning("Response cache unavailable, continuing without cache: %s", e)

        session = cls(
            model_client=model_client,
            text_model=text_model,
            multimodal_model=multimodal_model,
            cache=cache,
            timeout=timeout,
        )
        logger.info(
            "Session ready (text_model=%s, multimodal_model=%s, cache=%s)",
            session.text_model,
            session.multimodal_model,
            "on" if session.cache_enabled else "off",
        )
        return session

    def resolve_model(self, query: Query) -> str:
        """Pick the model identifier a query is sent to.

        Args:
            query: The query to route

        Returns:
            The override if set, else the multimodal model when the query
            carries inline data, else the text model
        """
        if query.model_override is not None:
            return query.model_override
        if query.has_inline_data:
            return self._multimodal_model
        return self._text_model

    async def query(
        self,
        prompt: str,
        temperature: float | None = None,
        inline_data: str | None = None,
        data_mime_type: str | None = None,
        model_override: str | None = None,
    ) -> str:
        """Build a Query from arguments and run it through ``query_model``."""
        return await self.query_model(
            Query(
                prompt=prompt,
                temperature=temperature,
                inline_data=inline_data,
                data_mime_type=data_mime_type,
                model_override=model_override,
            )
        )

    async def query_model(self, query: Query) -> str:
        """Answer a query, from the cache when possible.

        Args:
            query: The query to answer

        Returns:
            The response text with surrounding whitespace removed

        Raises:
            InvalidPayload: If inline data is not valid base64
            InferenceFailed: If the model call fails or times out
        """
        model = self.resolve_model(query)
        key = derive_key(query)

        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                self._metrics.record_hit()
                logger.debug("Cache hit for %s (model=%s)", key, model)
                return cached.decode("utf-8")

        self._metrics.record_miss()
        logger.debug("Cache miss for %s (model=%s)", key, model)

        parts = self._build_parts(query)
        temperature = query.temperature if query.temperature is not None else DEFAULT_TEMPERATURE

        start_time = time.perf_counter()
        result = await self._call_model(
            model,
            self._model_client.generate(model, parts, temperature),
        )
        self._metrics.record_llm_call((time.perf_counter() - start_time) * 1000)

        result = result.strip()
        if result:
            self._store(key, result)
        else:
            logger.warning("Empty response from %s not cached", model)
        return result

    async def count_tokens(self, prompt: str, model_override: str | None = None) -> int:
        """Count prompt tokens with the remote model. Never cached.

        Args:
            prompt: The prompt text
            model_override: Model to count against. Defaults to the text model.

        Returns:
            Total token count

        Raises:
            InferenceFailed: If the model call fails or times out
        """
        model = model_override or self._text_model
        count = await self._call_model(model, self._model_client.count_tokens(model, prompt))
        self._metrics.record_token_count()
        return count

    def _build_parts(self, query: Query) -> list[ContentPart]:
        parts = [ContentPart.from_text(query.prompt)]
        if query.inline_data is None:
            return parts

        try:
            # Line breaks from MIME-style wrapping are ignored; anything else outside
            # the alphabet is rejected.
            data = base64.b64decode(query.inline_data.replace("\r", "").replace("\n", ""), validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidPayload(f"Failed to decode base64 data: {e}") from e

        if query.data_mime_type is None:
            logger.warning("Inline data given without a media type; sending the prompt only")
            return parts

        parts.append(ContentPart.from_bytes(data, query.data_mime_type))
        return parts

    async def _call_model(self, model: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            self._metrics.record_llm_failure()
            logger.error("Request to %s timed out after %ss", model, self._timeout)
            raise InferenceFailed(
                f"Request to {model} timed out after {self._timeout}s",
                model=model,
                timed_out=True,
            ) from e
        except InferenceFailed as e:
            self._metrics.record_llm_failure()
            logger.error("Model call to %s failed: %s", model, e)
            raise
        except Exception as e:
            self._metrics.record_llm_failure()
            logger.error("Model call to %s failed: %s", model, e)
            raise InferenceFailed(f"Failed to process response: {e}", model=model) from e

    def _store(self, key: str, text: str) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, text.encode("utf-8"))
        except Exception as e:
            self._metrics.record_cache_write_failure()
            logger.warning("Cache write failed for %s: %s", key, e)

    def set_timeout(self, timeout: float | timedelta) -> None:
        """Change the per-request timeout for subsequent calls.

        Args:
            timeout: Seconds, or a timedelta

        Raises:
            ValueError: If the timeout is not positive
        """
        seconds = _to_seconds(timeout)
        if seconds <= 0:
            raise ValueError(f"Timeout must be positive, got {seconds}")
        self._timeout = seconds

    def get_stats(self) -> dict:
        """Get session statistics.

        Returns:
            Dictionary with configuration, metrics and cache stats
        """
        return {
            "text_model": self._text_model,
            "multimodal_model": self._multimodal_model,
            "timeout": self._timeout,
            "cache_enabled": self.cache_enabled,
            "metrics": self._metrics.to_dict(),
            "cache": self._cache.get_stats() if self._cache is not None else None,
        }

    async def close(self) -> None:
        """Release the cache and the model client.

        Optional; a session left open is torn down at process exit.
        """
        if self._cache is not None:
            self._cache.close()
        await self._model_client.close()

    async def __aenter__(self) -> "ClientSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def timeout(self) -> float:
        """Current per-request timeout in seconds."""
        return self._timeout

    @property
    def cache_enabled(self) -> bool:
        return self._cache is not None

    @property
    def cache(self) -> ResponseCache | None:
        """Get the underlying cache (for testing)."""
        return self._cache

    @property
    def model_client(self) -> ModelClient:
        """Get the underlying model client (for testing)."""
        return self._model_client

    @property
    def metrics(self) -> SessionMetrics:
        return self._metrics

    @property
    def text_model(self) -> str:
        return self._text_model

    @property
    def multimodal_model(self) -> str:
        return self._multimodal_model
