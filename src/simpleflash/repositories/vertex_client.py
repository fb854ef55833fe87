"""Vertex AI model client.

Talks to Gemini models hosted on Vertex AI through the google-genai SDK,
authenticated with Application Default Credentials.

Requirements:
    - A Google Cloud project with the Vertex AI API enabled
    - Credentials discoverable by google-auth, for example after
      `gcloud auth application-default login`, or a service account
      referenced by GOOGLE_APPLICATION_CREDENTIALS
"""

import logging
from typing import Sequence

import google.auth
import httpx
from google import genai
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError
from google.genai import errors as genai_errors
from google.genai import types

from simpleflash.config import settings
from simpleflash.entities import ContentPart
from simpleflash.errors import CredentialsUnavailable, InferenceFailed

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


class VertexModelClient:
    """Vertex AI implementation of the ModelClient protocol.

    This class satisfies the ModelClient protocol through structural
    typing - no explicit inheritance needed.

    SDK and transport errors are translated into ``InferenceFailed``;
    a transport timeout sets ``timed_out`` on the raised error.

    Example:
        ```python
        client = VertexModelClient.create(project_id="my-project")
        text = await client.generate(
            "gemini-1.5-flash-001",
            [ContentPart.from_text("Write a haiku about cows.")],
            temperature=0.0,
        )
        ```
    """

    def __init__(
        self,
        project_id: str | None = None,
        location: str | None = None,
        credentials: Credentials | None = None,
        client: genai.Client | None = None,
    ) -> None:
        """Initialize the Vertex AI client.

        Args:
            project_id: Google Cloud project. Defaults to settings.project_id.
            location: Vertex AI region. Defaults to settings.project_location.
            credentials: Explicit credentials. If None, uses Application Default Credentials.
            client: Pre-built genai client, mainly for tests.

        Raises:
            CredentialsUnavailable: If no default credentials can be found
        """
        self._project_id = project_id or settings.project_id
        self._location = location or settings.project_location

        if client is None:
            if credentials is None:
                credentials = self._default_credentials()
            client = genai.Client(
                vertexai=True,
                project=self._project_id,
                location=self._location,
                credentials=credentials,
            )
        self._client = client

    @classmethod
    def create(
        cls,
        project_id: str | None = None,
        location: str | None = None,
    ) -> "VertexModelClient":
        """Factory method to create VertexModelClient with defaults.

        Args:
            project_id: Google Cloud project. If None, uses settings.
            location: Vertex AI region. If None, uses settings.

        Returns:
            Configured VertexModelClient
        """
        return cls(project_id=project_id, location=location)

    @staticmethod
    def _default_credentials() -> Credentials:
        try:
            credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
        except DefaultCredentialsError as e:
            raise CredentialsUnavailable(f"Failed to obtain default credentials: {e}") from e
        return credentials

    @staticmethod
    def _to_part(part: ContentPart) -> types.Part:
        if part.is_text:
            return types.Part.from_text(text=part.text)
        return types.Part.from_bytes(data=part.data, mime_type=part.mime_type)

    async def generate(
        self,
        model: str,
        parts: Sequence[ContentPart],
        temperature: float,
    ) -> str:
        """Generate a response for an ordered list of content parts.

        Args:
            model: The model identifier
            parts: Text and binary parts, in order
            temperature: Sampling temperature

        Returns:
            The generated text, untrimmed

        Raises:
            InferenceFailed: If the API or the transport reports an error, or the
                response carries no text (e.g. blocked by safety filters)
        """
        contents = [types.Content(role="user", parts=[self._to_part(p) for p in parts])]
        config = types.GenerateContentConfig(temperature=temperature)
        logger.debug("Calling %s with %d content part(s), temperature=%s", model, len(parts), temperature)

        try:
            response = await self._client.aio.models.generate_content(
                model=model,
                contents=contents,
                config=config,
            )
        except httpx.TimeoutException as e:
            raise InferenceFailed(f"Vertex AI request timed out: {e}", model=model, timed_out=True) from e
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise InferenceFailed(f"Failed to process response: {e}", model=model) from e

        if response.text is None:
            raise InferenceFailed("Model returned no text", model=model)
        return response.text

    async def count_tokens(self, model: str, text: str) -> int:
        """Count the tokens the model would see for a prompt.

        Args:
            model: The model identifier
            text: The prompt text

        Returns:
            Total token count

        Raises:
            InferenceFailed: If the API or the transport reports an error
        """
        try:
            response = await self._client.aio.models.count_tokens(model=model, contents=text)
        except httpx.TimeoutException as e:
            raise InferenceFailed(f"Vertex AI request timed out: {e}", model=model, timed_out=True) from e
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise InferenceFailed(f"Failed to count tokens: {e}", model=model) from e

        return response.total_tokens or 0

    async def close(self) -> None:
        """Close the underlying async HTTP client.

        Should be called when shutting down the application.
        """
        await self._client.aio.aclose()

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def location(self) -> str:
        return self._location
