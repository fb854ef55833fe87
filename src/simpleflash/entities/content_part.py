"""Outbound content part entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContentPart:
    """One element of the ordered content list sent to the model.

    Either ``text`` is set, or ``data`` together with ``mime_type``.
    """

    text: str | None = None
    data: bytes | None = None
    mime_type: str | None = None

    @classmethod
    def from_text(cls, text: str) -> "ContentPart":
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "ContentPart":
        return cls(data=data, mime_type=mime_type)

    @property
    def is_text(self) -> bool:
        return self.text is not None
