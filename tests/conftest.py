import asyncio

import pytest

from simpleflash.repositories import MemoryResponseCache
from simpleflash.services import ClientSession

TEXT_MODEL = "gemini-1.5-flash-001"
MULTIMODAL_MODEL = "gemini-1.0-pro-vision-001"


class FakeModelClient:
    """ModelClient double that records every call."""

    def __init__(self, response="  haiku text\n", token_count=7, delay=0.0, error=None):
        self.response = response
        self.token_count = token_count
        self.delay = delay
        self.error = error
        self.calls = []
        self.token_calls = []
        self.closed = False

    async def generate(self, model, parts, temperature):
        self.calls.append({"model": model, "parts": list(parts), "temperature": temperature})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def count_tokens(self, model, text):
        self.token_calls.append({"model": model, "text": text})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.token_count

    async def close(self):
        self.closed = True


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def model_client():
    return FakeModelClient()


@pytest.fixture
def memory_cache():
    return MemoryResponseCache(ttl=3600, max_size_bytes=1024 * 1024)


@pytest.fixture
def session(model_client, memory_cache):
    return ClientSession(
        model_client=model_client,
        text_model=TEXT_MODEL,
        multimodal_model=MULTIMODAL_MODEL,
        cache=memory_cache,
        timeout=5,
    )


@pytest.fixture
def uncached_session(model_client):
    return ClientSession(
        model_client=model_client,
        text_model=TEXT_MODEL,
        multimodal_model=MULTIMODAL_MODEL,
        cache=None,
        timeout=5,
    )
