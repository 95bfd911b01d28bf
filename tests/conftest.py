import asyncio
from typing import List, Optional

import pytest
import pytest_asyncio

from swipekeys.keyboard import QWERTYKeyboard
from swipekeys.pattern_cache import MemoryStore, PatternCache
from swipekeys.scorer import ScoreRequest, ScoreResult


class FakeScorer:
    """Scorer double returning a fixed result, optionally after a gate or delay."""

    def __init__(self, predictions=('hello', 'help'), next_word=None, error=None, delay=0.0):
        self.result = ScoreResult(predictions=tuple(predictions), next_word=next_word)
        self.error = error
        self.delay = delay
        self.gate: Optional[asyncio.Event] = None
        self.requests: List[ScoreRequest] = []

    async def score(self, request: ScoreRequest) -> ScoreResult:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


class FailingStore(MemoryStore):
    async def set(self, key, value):
        raise OSError('disk full')


class ManualClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def keyboard():
    return QWERTYKeyboard()


@pytest.fixture
def key_map(keyboard):
    return keyboard.key_map()


@pytest.fixture
def words():
    return ['hello', 'help', 'hole', 'halo', 'hero', 'are', 'art', 'ape']


@pytest.fixture
def store():
    return MemoryStore()


@pytest_asyncio.fixture
async def cache(store):
    cache = PatternCache(store)
    await cache.load()
    return cache


@pytest.fixture
def scorer():
    return FakeScorer()


@pytest.fixture
def clock():
    return ManualClock()
