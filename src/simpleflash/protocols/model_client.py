"""Model inference protocol.

Defines the interface to the remote language model. The wire protocol
is the implementation's concern; callers only see text in, text out.

Implementations:
- Vertex AI through the google-genai SDK (default)
- Test doubles that count calls
"""

from typing import Protocol, Sequence, runtime_checkable

from simpleflash.entities import ContentPart


@runtime_checkable
class ModelClient(Protocol):
    """Protocol for remote model inference services.

    Errors should be raised as ``InferenceFailed``; the session wraps
    anything else it receives.
    """

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
        """
        ...

    async def count_tokens(self, model: str, text: str) -> int:
        """Count the tokens the model would see for a prompt.

        Args:
            model: The model identifier
            text: The prompt text

        Returns:
            Total token count
        """
        ...

    async def close(self) -> None:
        """Close any underlying connections."""
        ...
