"""Cache key derivation.

A key is the SHA-256 of the query fields concatenated in a fixed order:
prompt, temperature (six decimals), inline data exactly as supplied,
data media type, model override. Absent fields are skipped entirely.
"""

import hashlib

from simpleflash.entities import Query


def key_material(query: Query) -> bytes:
    """Build the byte sequence that is hashed into the cache key.

    Args:
        query: The query to describe

    Returns:
        UTF-8 bytes of the concatenated fields
    """
    components = [query.prompt]
    if query.temperature is not None:
        components.append(f"{query.temperature:f}")
    if query.inline_data is not None:
        components.append(query.inline_data)
    if query.data_mime_type is not None:
        components.append(query.data_mime_type)
    if query.model_override is not None:
        components.append(query.model_override)
    return "".join(components).encode("utf-8")


def derive_key(query: Query) -> str:
    """Derive the deterministic cache key for a query.

    Args:
        query: The query to key

    Returns:
        64 lowercase hex characters
    """
    return hashlib.sha256(key_material(query)).hexdigest()
