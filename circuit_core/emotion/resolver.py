"""
Word Resolver

Tiered resolution of words to emotional profiles:

    in-process cache -> persistent store -> external inference -> write-back

A store hit populates the cache. An inference hit populates the cache
immediately and is then persisted to the store. Failed inference is never
cached, so the word is retried on the next text.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

import structlog

from ..config import PersistMode
from ..inference.base import InferenceClient
from .base import EmotionalProfile, Provenance, WordAnalysis
from .lexicon import Token, is_emotionally_significant, normalize_word
from .stores import ProfileStore


logger = structlog.get_logger(__name__)


@dataclass
class ResolutionStats:
    """Counters for one resolution pass."""

    cache_hits: int = 0
    store_hits: int = 0
    inference_calls: int = 0
    inference_failures: int = 0
    new_words_added: int = 0
    unresolved: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary."""
        return {
            "cache_hits": self.cache_hits,
            "store_hits": self.store_hits,
            "inference_calls": self.inference_calls,
            "inference_failures": self.inference_failures,
            "new_words_added": self.new_words_added,
            "unresolved": self.unresolved,
        }


@dataclass
class _InferenceOutcome:
    profile: Optional[EmotionalProfile] = None
    called: bool = False
    persisted: bool = False


class WordResolver:
    """
    Resolves normalized words through cache, store and inference.

    The cache is a plain dict owned by this instance; it lives for the
    process and is never invalidated. Concurrent resolutions of the same
    unknown word share a single inference call.
    """

    def __init__(
        self,
        store: ProfileStore,
        inference: Optional[InferenceClient] = None,
        max_inference_per_text: int = 3,
        persist_mode: PersistMode = PersistMode.INSERT_IF_ABSENT,
    ):
        self.store = store
        self.inference = inference
        self.max_inference_per_text = max_inference_per_text
        self.persist_mode = PersistMode(persist_mode)

        self._cache: Dict[str, EmotionalProfile] = {}
        self._in_flight: Dict[str, "asyncio.Future[_InferenceOutcome]"] = {}

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def prime(self, word: str, profile: EmotionalProfile) -> None:
        """Place a profile in the cache without touching the store."""
        self._cache[normalize_word(word)] = profile

    # -------------------------------------------------------------------------
    # Single word
    # -------------------------------------------------------------------------

    async def lookup(self, word: str) -> Tuple[Optional[EmotionalProfile], Provenance]:
        """Cache then store; never calls inference."""
        key = normalize_word(word)
        if not key:
            return None, Provenance.NOT_FOUND

        profile = self._cache.get(key)
        if profile is not None:
            return profile, Provenance.CACHE

        profile = await self.store.get_by_word(key)
        if profile is not None:
            self._cache[key] = profile
            return profile, Provenance.STORE

        return None, Provenance.NOT_FOUND

    async def resolve(self, word: str) -> WordAnalysis:
        """Resolve one word through every tier."""
        key = normalize_word(word)
        profile, provenance = await self.lookup(key)

        if profile is None and key and self.inference is not None:
            outcome = await self._infer(key)
            if outcome.profile is not None:
                profile, provenance = outcome.profile, Provenance.INFERENCE

        return WordAnalysis(
            token=word,
            normalized=key,
            profile=profile,
            provenance=provenance,
        )

    # -------------------------------------------------------------------------
    # Whole text
    # -------------------------------------------------------------------------

    async def resolve_tokens(
        self,
        tokens: Sequence[Token],
    ) -> Tuple[List[WordAnalysis], ResolutionStats]:
        """
        Resolve every token of one text.

        Tokens are looked up via cache and store first. Unknown words are
        de-duplicated in first-occurrence order and filtered to emotionally
        significant ones, falling back to the first unknown word when none
        qualify. At most ``max_inference_per_text`` of them are sent to
        inference concurrently; every occurrence of a resolved word is
        updated.
        """
        stats = ResolutionStats()
        analyses: List[WordAnalysis] = []
        unknown: List[str] = []
        missing: Set[str] = set()

        for token in tokens:
            key = token.normalized
            if key in missing:
                analyses.append(WordAnalysis(token=token.text, normalized=key))
                continue

            profile, provenance = await self.lookup(key)
            if provenance is Provenance.CACHE:
                stats.cache_hits += 1
            elif provenance is Provenance.STORE:
                stats.store_hits += 1
            else:
                missing.add(key)
                unknown.append(key)

            analyses.append(
                WordAnalysis(
                    token=token.text,
                    normalized=key,
                    profile=profile,
                    provenance=provenance,
                )
            )

        resolved = await self._infer_unknown(unknown, stats)

        if resolved:
            analyses = [
                WordAnalysis(
                    token=a.token,
                    normalized=a.normalized,
                    profile=resolved[a.normalized],
                    provenance=Provenance.INFERENCE,
                )
                if not a.found and a.normalized in resolved
                else a
                for a in analyses
            ]

        stats.unresolved = sum(1 for a in analyses if not a.found)

        logger.debug(
            "tokens_resolved",
            tokens=len(analyses),
            unknown=len(unknown),
            **stats.to_dict(),
        )
        return analyses, stats

    def select_for_inference(self, unknown: Sequence[str]) -> List[str]:
        """Pick which unknown words are worth an inference call."""
        if not unknown or self.max_inference_per_text <= 0:
            return []

        candidates = [w for w in unknown if is_emotionally_significant(w)]
        if not candidates:
            candidates = [unknown[0]]
        return candidates[: self.max_inference_per_text]

    async def _infer_unknown(
        self,
        unknown: Sequence[str],
        stats: ResolutionStats,
    ) -> Dict[str, EmotionalProfile]:
        if self.inference is None:
            return {}

        selected = self.select_for_inference(unknown)
        if not selected:
            return {}

        outcomes = await asyncio.gather(*(self._infer(word) for word in selected))

        resolved: Dict[str, EmotionalProfile] = {}
        for word, outcome in zip(selected, outcomes):
            if outcome.called:
                if outcome.profile is not None:
                    stats.inference_calls += 1
                else:
                    stats.inference_failures += 1
            if outcome.persisted:
                stats.new_words_added += 1
            if outcome.profile is not None:
                resolved[word] = outcome.profile
        return resolved

    # -------------------------------------------------------------------------
    # Inference with in-flight sharing
    # -------------------------------------------------------------------------

    async def _infer(self, key: str) -> _InferenceOutcome:
        pending = self._in_flight.get(key)
        if pending is not None:
            shared = await asyncio.shield(pending)
            return _InferenceOutcome(profile=shared.profile)

        cached = self._cache.get(key)
        if cached is not None:
            return _InferenceOutcome(profile=cached)

        future: "asyncio.Future[_InferenceOutcome]" = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        outcome = _InferenceOutcome(called=True)
        try:
            outcome.profile = await self._call_inference(key)
            if outcome.profile is not None:
                self._cache[key] = outcome.profile
                outcome.persisted = await self.store.upsert_word(
                    key,
                    outcome.profile,
                    overwrite=self.persist_mode is PersistMode.OVERWRITE,
                )
        finally:
            self._in_flight.pop(key, None)
            if not future.done():
                future.set_result(outcome)

        logger.info(
            "word_inferred" if outcome.profile is not None else "word_inference_failed",
            word=key,
            persisted=outcome.persisted,
        )
        return outcome

    async def _call_inference(self, key: str) -> Optional[EmotionalProfile]:
        try:
            return await self.inference.analyze_word(key)
        except Exception as e:
            # Clients must not raise; treat a misbehaving one as a miss
            logger.error("inference_client_raised", word=key, error=str(e))
            return None


__all__ = [
    "ResolutionStats",
    "WordResolver",
]
