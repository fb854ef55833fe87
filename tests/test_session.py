"""
Tests for query orchestration in ClientSession.
"""

import asyncio
import base64
from dataclasses import replace
from datetime import timedelta

import pytest

from simpleflash.entities import ContentPart, Query
from simpleflash.errors import CacheUnavailable, InferenceFailed, InvalidPayload
from simpleflash.keys import derive_key
from simpleflash.repositories import MemoryResponseCache
from simpleflash.services import DEFAULT_TEMPERATURE, ClientSession

from conftest import MULTIMODAL_MODEL, TEXT_MODEL, FakeModelClient

IMAGE = base64.b64encode(b"\x89PNG fake image bytes").decode("ascii")


def run(coro):
    return asyncio.run(coro)


class BrokenCache(MemoryResponseCache):
    def set(self, key, value):
        raise RuntimeError("disk full")


def failing_cache_factory():
    raise CacheUnavailable("no room for a cache")


# Response handling


def test_response_is_trimmed(session):
    assert run(session.query("Write a haiku")) == "haiku text"


def test_trimmed_response_is_what_gets_cached(session):
    query = Query(prompt="Write a haiku")
    run(session.query_model(query))

    assert session.cache.get(derive_key(query)) == b"haiku text"


def test_prompt_is_sent_as_single_text_part(session, model_client):
    run(session.query("Write a haiku"))

    call = model_client.calls[0]
    assert call["parts"] == [ContentPart.from_text("Write a haiku")]
    assert call["temperature"] == DEFAULT_TEMPERATURE


def test_explicit_temperature_is_forwarded(session, model_client):
    run(session.query("Write a haiku", temperature=0.9))
    assert model_client.calls[0]["temperature"] == 0.9


# Cache short-circuit


def test_second_identical_query_is_served_from_cache(session, model_client):
    first = run(session.query("Write a haiku", temperature=0.2))
    second = run(session.query("Write a haiku", temperature=0.2))

    assert first == second == "haiku text"
    assert len(model_client.calls) == 1
    assert session.metrics.cache_hits == 1
    assert session.metrics.cache_misses == 1


def test_different_queries_miss(session, model_client):
    run(session.query("Write a haiku"))
    run(session.query("Write a haiku", temperature=0.5))

    assert len(model_client.calls) == 2


def test_cached_value_returned_verbatim(session, model_client):
    query = Query(prompt="Write a haiku")
    session.cache.set(derive_key(query), b"  stored as is  ")

    assert run(session.query_model(query)) == "  stored as is  "
    assert model_client.calls == []


# Model resolution


def test_text_query_routes_to_text_model(session, model_client):
    run(session.query("hello"))
    assert model_client.calls[0]["model"] == TEXT_MODEL


def test_inline_data_routes_to_multimodal_model(session, model_client):
    run(session.query("describe", inline_data=IMAGE, data_mime_type="image/png"))
    assert model_client.calls[0]["model"] == MULTIMODAL_MODEL


def test_override_wins_over_inline_data(session, model_client):
    run(session.query("describe", inline_data=IMAGE, data_mime_type="image/png", model_override="gemini-custom"))
    assert model_client.calls[0]["model"] == "gemini-custom"


def test_override_wins_for_text(session, model_client):
    run(session.query("hello", model_override="gemini-custom"))
    assert model_client.calls[0]["model"] == "gemini-custom"


def test_inline_data_is_decoded_and_sent_after_prompt(session, model_client):
    run(session.query("describe", inline_data=IMAGE, data_mime_type="image/png"))

    assert model_client.calls[0]["parts"] == [
        ContentPart.from_text("describe"),
        ContentPart.from_bytes(b"\x89PNG fake image bytes", "image/png"),
    ]


def test_inline_data_without_media_type_sends_prompt_only(session, model_client):
    run(session.query("describe", inline_data=IMAGE))

    assert model_client.calls[0]["parts"] == [ContentPart.from_text("describe")]
    assert model_client.calls[0]["model"] == MULTIMODAL_MODEL


def test_line_wrapped_base64_is_accepted(session, model_client):
    data = bytes(range(256)) * 2
    wrapped = base64.encodebytes(data).decode("ascii")
    assert "\n" in wrapped

    run(session.query("describe", inline_data=wrapped, data_mime_type="image/png"))

    assert model_client.calls[0]["parts"][1] == ContentPart.from_bytes(data, "image/png")


def test_line_wrapped_base64_keys_on_text_as_supplied(session):
    wrapped = base64.encodebytes(b"\x89PNG" * 40).decode("ascii").replace("\n", "\r\n")
    query = Query(prompt="describe", inline_data=wrapped, data_mime_type="image/png")

    run(session.query_model(query))

    unwrapped = replace(query, inline_data=wrapped.replace("\r\n", ""))
    assert session.cache.get(derive_key(query)) == b"haiku text"
    assert session.cache.get(derive_key(unwrapped)) is None


# Invalid payload


@pytest.mark.parametrize("payload", ["not base64!!", "abc", "aGVsbG8", "äöü="])
def test_invalid_payload_never_reaches_model(session, model_client, payload):
    with pytest.raises(InvalidPayload):
        run(session.query("describe", inline_data=payload, data_mime_type="image/png"))

    assert model_client.calls == []


# Cache-disabled fallback


def test_uncached_session_always_calls_model(uncached_session, model_client):
    run(uncached_session.query("hello"))
    run(uncached_session.query("hello"))

    assert len(model_client.calls) == 2
    assert uncached_session.cache_enabled is False


def test_create_with_cache_disabled(model_client):
    session = ClientSession.create(
        TEXT_MODEL,
        MULTIMODAL_MODEL,
        "europe-west4",
        "test-project",
        False,
        model_client=model_client,
    )

    assert session.cache_enabled is False
    assert run(session.query("hello")) == "haiku text"


def test_create_survives_cache_init_failure(model_client):
    session = ClientSession.create(
        TEXT_MODEL,
        MULTIMODAL_MODEL,
        "europe-west4",
        "test-project",
        True,
        model_client=model_client,
        cache_factory=failing_cache_factory,
    )

    assert session.cache_enabled is False
    assert run(session.query("hello")) == "haiku text"
    assert run(session.query("hello")) == "haiku text"
    assert len(model_client.calls) == 2


def test_create_with_cache_enabled(model_client):
    session = ClientSession.create(
        enable_cache=True,
        model_client=model_client,
        cache_factory=lambda: MemoryResponseCache(ttl=60, max_size_bytes=1024),
    )

    assert session.cache_enabled is True
    run(session.query("hello"))
    run(session.query("hello"))
    assert len(model_client.calls) == 1


def test_cache_write_failure_is_swallowed(model_client):
    session = ClientSession(
        model_client=model_client,
        cache=BrokenCache(ttl=60, max_size_bytes=1024),
    )

    assert run(session.query("hello")) == "haiku text"
    assert session.metrics.cache_write_failures == 1


# Remote failures


def test_model_error_is_wrapped(session):
    session.model_client.error = ConnectionError("quota exceeded")

    with pytest.raises(InferenceFailed) as excinfo:
        run(session.query("hello"))

    assert excinfo.value.timed_out is False
    assert excinfo.value.model == TEXT_MODEL
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_inference_failed_passes_through(session):
    original = InferenceFailed("permission denied", model=TEXT_MODEL)
    session.model_client.error = original

    with pytest.raises(InferenceFailed) as excinfo:
        run(session.query("hello"))

    assert excinfo.value is original


def test_empty_response_is_not_cached(session, model_client):
    model_client.response = "  \n"

    assert run(session.query("hello")) == ""

    model_client.response = "haiku text"
    assert run(session.query("hello")) == "haiku text"
    assert len(model_client.calls) == 2


def test_failed_call_is_not_cached(session, model_client):
    model_client.error = ConnectionError("boom")
    with pytest.raises(InferenceFailed):
        run(session.query("hello"))

    model_client.error = None
    assert run(session.query("hello")) == "haiku text"
    assert len(model_client.calls) == 2


def test_timeout_raises_timed_out_inference_failure():
    client = FakeModelClient(delay=1.0)
    session = ClientSession(model_client=client, timeout=0.01)

    with pytest.raises(InferenceFailed) as excinfo:
        run(session.query("hello"))

    assert excinfo.value.timed_out is True
    assert session.metrics.llm_failures == 1


# Concurrency


def test_concurrent_identical_queries(model_client, memory_cache):
    model_client.delay = 0.01
    session = ClientSession(model_client=model_client, cache=memory_cache, timeout=5)
    n = 10

    async def fire():
        return await asyncio.gather(*(session.query("Write a haiku") for _ in range(n)))

    results = run(fire())

    assert results == ["haiku text"] * n
    assert 1 <= len(model_client.calls) <= n
    assert memory_cache.get(derive_key(Query(prompt="Write a haiku"))) == b"haiku text"


# Token counting


def test_count_tokens_bypasses_cache(session, model_client):
    assert run(session.count_tokens("hello")) == 7
    assert run(session.count_tokens("hello")) == 7

    assert len(model_client.token_calls) == 2
    assert model_client.token_calls[0] == {"model": TEXT_MODEL, "text": "hello"}
    assert session.cache.get_stats()["total_entries"] == 0


def test_count_tokens_with_override(session, model_client):
    run(session.count_tokens("hello", model_override="gemini-custom"))
    assert model_client.token_calls[0]["model"] == "gemini-custom"


def test_count_tokens_wraps_errors(session, model_client):
    model_client.error = ConnectionError("down")
    with pytest.raises(InferenceFailed):
        run(session.count_tokens("hello"))


# Timeout and lifecycle


def test_set_timeout(session):
    session.set_timeout(10)
    assert session.timeout == 10.0

    session.set_timeout(timedelta(minutes=1))
    assert session.timeout == 60.0


@pytest.mark.parametrize("value", [0, -1, timedelta(0)])
def test_set_timeout_rejects_non_positive(session, value):
    with pytest.raises(ValueError):
        session.set_timeout(value)


def test_stats(session):
    run(session.query("hello"))
    stats = session.get_stats()

    assert stats["text_model"] == TEXT_MODEL
    assert stats["multimodal_model"] == MULTIMODAL_MODEL
    assert stats["cache_enabled"] is True
    assert stats["metrics"]["llm_calls"] == 1
    assert stats["cache"]["total_entries"] == 1


def test_async_context_manager_closes(session, model_client):
    async def use():
        async with session:
            await session.query("hello")

    run(use())

    assert model_client.closed
    assert session.cache.get_stats()["total_entries"] == 0
