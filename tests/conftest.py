"""Shared pytest fixtures for testing."""

import asyncio
from typing import Dict, List, Optional

import pytest
import pytest_asyncio

from circuit_core.database.base import DatabaseManager
from circuit_core.emotion.base import (
    CATEGORY_ORDER,
    VAD,
    EmotionalProfile,
    Sentiment,
    SentimentPolarity,
)
from circuit_core.emotion.stores import InMemoryAnalysisLogStore, InMemoryProfileStore
from circuit_core.inference.base import InferenceClient


# =============================================================================
# Profile Builders
# =============================================================================


def build_profile(
    dominant: str = "joy",
    confidence: float = 0.6,
    polarity: str = "positive",
    strength: float = 0.7,
    valence: float = 0.5,
    arousal: float = 0.5,
    dominance: float = 0.5,
) -> EmotionalProfile:
    """Profile with ``confidence`` on one category, the rest spread evenly."""
    rest = (1.0 - confidence) / (len(CATEGORY_ORDER) - 1)
    emotions = {
        category: confidence if category == dominant else rest
        for category in CATEGORY_ORDER
    }
    return EmotionalProfile(
        emotions=emotions,
        vad=VAD(valence=valence, arousal=arousal, dominance=dominance),
        sentiment=Sentiment(polarity=SentimentPolarity(polarity), strength=strength),
    )


@pytest.fixture
def make_profile():
    """Factory for emotional profiles."""
    return build_profile


@pytest.fixture
def joyful_profile() -> EmotionalProfile:
    return build_profile("joy", 0.6, "positive", valence=0.9, arousal=0.7)


# =============================================================================
# Fakes
# =============================================================================


class FakeInferenceClient(InferenceClient):
    """Inference client answering from a dictionary."""

    name = "fake"

    def __init__(
        self,
        profiles: Optional[Dict[str, EmotionalProfile]] = None,
        delay: float = 0.0,
    ):
        self.profiles = profiles or {}
        self.delay = delay
        self.calls: List[str] = []
        self.closed = False

    async def analyze_word(self, word: str) -> Optional[EmotionalProfile]:
        self.calls.append(word)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.profiles.get(word)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_inference():
    """Factory for fake inference clients."""
    return FakeInferenceClient


@pytest.fixture
def profile_store(make_profile) -> InMemoryProfileStore:
    """In-memory lexicon with a few curated words."""
    return InMemoryProfileStore({
        "wonderful": make_profile("joy", 0.6, "positive", valence=0.9, arousal=0.7),
        "amazing": make_profile("joy", 0.6, "positive", valence=0.85, arousal=0.8),
        "terrible": make_profile("sadness", 0.55, "negative", valence=0.1, arousal=0.4),
        "furious": make_profile("anger", 0.7, "negative", valence=0.05, arousal=0.95),
    })


@pytest.fixture
def log_store() -> InMemoryAnalysisLogStore:
    return InMemoryAnalysisLogStore()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'circuit.db'}"


@pytest_asyncio.fixture
async def db(database_url):
    """SQLite database with all tables created."""
    manager = DatabaseManager(database_url)
    await manager.create_all()
    yield manager
    await manager.close()
