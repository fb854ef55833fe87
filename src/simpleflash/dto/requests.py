"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field

from simpleflash.entities import Query


class QueryRequest(BaseModel):
    """Request DTO for querying the model.

    The handler will convert this to a Query entity for the service layer.
    """

    prompt: str = Field(..., description="The prompt text", min_length=1)
    temperature: float | None = Field(
        None,
        description="Sampling temperature (0.0 when omitted)",
        ge=0.0,
        le=2.0,
        allow_inf_nan=False,
    )
    inline_data: str | None = Field(
        None,
        description="Binary payload (e.g. image bytes) as standard base64 text",
    )
    data_mime_type: str | None = Field(
        None,
        description="Media type of the inline payload, e.g. 'image/png'",
    )
    model_override: str | None = Field(
        None,
        description="Model identifier that takes precedence over the session defaults",
    )

    def to_entity(self) -> Query:
        return Query(
            prompt=self.prompt,
            temperature=self.temperature,
            inline_data=self.inline_data,
            data_mime_type=self.data_mime_type,
            model_override=self.model_override,
        )


class CountTokensRequest(BaseModel):
    """Request DTO for counting prompt tokens."""

    prompt: str = Field(..., description="The prompt text", min_length=1)
    model_override: str | None = Field(
        None,
        description="Model to count against (defaults to the text model)",
    )


class TimeoutRequest(BaseModel):
    """Request DTO for changing the request timeout."""

    seconds: float = Field(..., description="New per-request timeout in seconds", gt=0.0)
