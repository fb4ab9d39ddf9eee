"""
Emotion Engine Module

Word-level emotional profiles, text aggregation and session mood tracking.

Example usage:

    from circuit_core.config import EngineConfig
    from circuit_core.emotion.service import EmotionAnalysisService

    service = EmotionAnalysisService.from_config(EngineConfig.from_env())
    async with service:
        result = await service.analyze_text("I feel wonderful and amazing today")
        print(result.overall_emotion, result.confidence)

The resolver and service modules depend on the inference and database
packages and are imported from their own modules.
"""

from .aggregator import TextAggregator, amplification_for, neutral_result
from .base import (
    CATEGORY_ORDER,
    NEUTRAL_LABEL,
    VAD,
    AnalysisLogRecord,
    CircuitEmotionError,
    EmotionalProfile,
    EmotionCategory,
    InvalidTextError,
    ProcessingMethod,
    ProfileValidationError,
    Provenance,
    Sentiment,
    SentimentPolarity,
    SentimentTrend,
    SessionAlreadyEndedError,
    SessionError,
    SessionNotFoundError,
    SessionStateError,
    SessionStatus,
    SessionSummary,
    TextResult,
    WordAnalysis,
)
from .lexicon import (
    STOP_WORDS,
    Token,
    is_emotionally_significant,
    normalize_word,
    profile_from_payload,
    tokenize,
)
from .log_worker import AnalysisLogWorker
from .seeding import SeedReport, seed_from_json, seed_from_paths
from .session import MoodSession, SessionAggregator, SessionRegistry
from .stores import (
    AnalysisLogStore,
    InMemoryAnalysisLogStore,
    InMemoryProfileStore,
    ProfileStore,
)

__all__ = [
    # Types
    "CATEGORY_ORDER",
    "NEUTRAL_LABEL",
    "EmotionCategory",
    "VAD",
    "Sentiment",
    "SentimentPolarity",
    "SentimentTrend",
    "EmotionalProfile",
    "Provenance",
    "WordAnalysis",
    "ProcessingMethod",
    "TextResult",
    "SessionStatus",
    "SessionSummary",
    "AnalysisLogRecord",
    # Exceptions
    "CircuitEmotionError",
    "ProfileValidationError",
    "InvalidTextError",
    "SessionError",
    "SessionNotFoundError",
    "SessionStateError",
    "SessionAlreadyEndedError",
    # Lexicon
    "STOP_WORDS",
    "Token",
    "normalize_word",
    "tokenize",
    "is_emotionally_significant",
    "profile_from_payload",
    # Stores
    "ProfileStore",
    "AnalysisLogStore",
    "InMemoryProfileStore",
    "InMemoryAnalysisLogStore",
    # Aggregation
    "TextAggregator",
    "amplification_for",
    "neutral_result",
    "SessionAggregator",
    "MoodSession",
    "SessionRegistry",
    # Background work
    "AnalysisLogWorker",
    "SeedReport",
    "seed_from_json",
    "seed_from_paths",
]
