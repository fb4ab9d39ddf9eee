"""
Store contracts consumed by the engine.

ProfileStore is the persistent word -> profile lookup; AnalysisLogStore is
the append-only sink for per-text analysis records. Implementations must not
raise on backend failure: lookups degrade to ``None`` and writes report
``False``.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .base import AnalysisLogRecord, EmotionalProfile
from .lexicon import normalize_word


class ProfileStore(ABC):
    """Persistent lookup from normalized word to emotional profile."""

    @abstractmethod
    async def get_by_word(self, word: str) -> Optional[EmotionalProfile]:
        """Case-insensitive exact lookup; ``None`` when absent or unavailable."""
        pass

    @abstractmethod
    async def upsert_word(
        self,
        word: str,
        profile: EmotionalProfile,
        overwrite: bool = False,
    ) -> bool:
        """
        Persist a profile.

        With ``overwrite`` False an existing row is left untouched.

        Returns:
            True if a row was written, False if skipped or the write failed
        """
        pass

    @abstractmethod
    async def count_words(self) -> int:
        """Number of stored words (0 when unavailable)."""
        pass


class AnalysisLogStore(ABC):
    """Append-only sink for analysis records."""

    @abstractmethod
    async def append(self, record: AnalysisLogRecord) -> None:
        """Write one record. May raise; callers treat failures as non-fatal."""
        pass


class InMemoryProfileStore(ProfileStore):
    """Dictionary-backed profile store for tests and local runs."""

    def __init__(self, profiles: Optional[Dict[str, EmotionalProfile]] = None):
        self._profiles: Dict[str, EmotionalProfile] = {}
        for word, profile in (profiles or {}).items():
            self._profiles[normalize_word(word)] = profile

        self.get_calls = 0
        self.upsert_calls = 0

    async def get_by_word(self, word: str) -> Optional[EmotionalProfile]:
        self.get_calls += 1
        return self._profiles.get(word.lower())

    async def upsert_word(
        self,
        word: str,
        profile: EmotionalProfile,
        overwrite: bool = False,
    ) -> bool:
        self.upsert_calls += 1
        key = word.lower()
        if key in self._profiles and not overwrite:
            return False
        self._profiles[key] = profile
        return True

    async def count_words(self) -> int:
        return len(self._profiles)


class InMemoryAnalysisLogStore(AnalysisLogStore):
    """List-backed analysis log."""

    def __init__(self):
        self.records: List[AnalysisLogRecord] = []

    async def append(self, record: AnalysisLogRecord) -> None:
        self.records.append(record)


__all__ = [
    "ProfileStore",
    "AnalysisLogStore",
    "InMemoryProfileStore",
    "InMemoryAnalysisLogStore",
]
