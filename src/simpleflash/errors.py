"""Error taxonomy for simpleflash.

Construction-time failures (``CredentialsUnavailable``) abort session
creation. ``CacheUnavailable`` is recovered from by running without a cache.
Per-query failures (``InvalidPayload``, ``InferenceFailed``) are raised to the
caller and never retried here.
"""


class SimpleFlashError(Exception):
    """Base exception for simpleflash errors"""
    pass


class CredentialsUnavailable(SimpleFlashError):
    """Raised when ambient Google Cloud credentials cannot be obtained"""
    pass


class CacheUnavailable(SimpleFlashError):
    """Raised when a response cache cannot be initialized"""
    pass


class InvalidPayload(SimpleFlashError):
    """Raised when inline data is not well-formed base64"""
    pass


class InferenceFailed(SimpleFlashError):
    """Raised when the remote model call fails or times out"""

    def __init__(self, message: str, model: str | None = None, timed_out: bool = False):
        self.model = model
        self.timed_out = timed_out
        super().__init__(message)
