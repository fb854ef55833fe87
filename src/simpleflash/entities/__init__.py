"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .content_part import ContentPart
from .query import Query

__all__ = ["CacheEntryEntity", "ContentPart", "Query"]
