"""Query domain entity."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Query:
    """A single request to the language model.

    Every optional field left as ``None`` contributes nothing to the
    cache key, so text-only queries keep the same key regardless of
    which optional parameters exist.

    Attributes:
        prompt: The prompt text
        temperature: Sampling temperature; ``0.0`` is sent when omitted.
            Must be finite.
        inline_data: Binary payload as base64 text (e.g. image bytes)
        data_mime_type: Media type of the inline payload (e.g. "image/png")
        model_override: Model identifier that wins over the session defaults
    """

    prompt: str
    temperature: float | None = None
    inline_data: str | None = None
    data_mime_type: str | None = None
    model_override: str | None = None

    @property
    def has_inline_data(self) -> bool:
        """Whether the query carries a binary payload."""
        return self.inline_data is not None

    def __post_init__(self) -> None:
        if self.temperature is not None and not math.isfinite(self.temperature):
            raise ValueError(f"Temperature must be a finite number, got {self.temperature}")
