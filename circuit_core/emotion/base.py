"""
Emotion Engine Base Types

This module defines the core types and data structures for the emotion
engine: per-word emotional profiles, per-token analyses, text-level results
and session-level mood summaries.

Key Concepts:
- Eight Plutchik categories in a fixed, explicit order (used for tie-breaks)
- Valence/arousal/dominance (VAD) triple, each in [0, 1]
- Sentiment polarity with strength
- Provenance of each resolved word (cache, store, inference, not-found)
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
)


# =============================================================================
# Emotion Categories
# =============================================================================


class EmotionCategory(str, Enum):
    """The eight emotion categories, in tie-break order."""

    JOY = "joy"
    TRUST = "trust"
    ANTICIPATION = "anticipation"
    SURPRISE = "surprise"
    ANGER = "anger"
    FEAR = "fear"
    SADNESS = "sadness"
    DISGUST = "disgust"


# Iteration order for every distribution; first max wins on ties.
CATEGORY_ORDER: Tuple[str, ...] = tuple(c.value for c in EmotionCategory)

NEUTRAL_LABEL = "neutral"
UNIFORM_WEIGHT = 1.0 / len(CATEGORY_ORDER)
PROBABILITY_TOLERANCE = 1e-3


def uniform_distribution() -> Dict[str, float]:
    """Return the uniform 0.125 distribution over all categories."""
    return {category: UNIFORM_WEIGHT for category in CATEGORY_ORDER}


def dominant_category(distribution: Mapping[str, float]) -> Tuple[str, float]:
    """
    Arg-max over the fixed category order.

    Ties go to the category declared first. Missing categories count as 0.0.
    """
    best = CATEGORY_ORDER[0]
    best_score = distribution.get(best, 0.0)
    for category in CATEGORY_ORDER[1:]:
        score = distribution.get(category, 0.0)
        if score > best_score:
            best = category
            best_score = score
    return best, best_score


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


# =============================================================================
# Sentiment and VAD
# =============================================================================


class SentimentPolarity(str, Enum):
    """Sentiment polarity labels."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SentimentTrend(str, Enum):
    """Mood trend direction across a session."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


@dataclass(frozen=True)
class VAD:
    """Valence, arousal and dominance, each clamped to [0, 1]."""

    valence: float = 0.5
    arousal: float = 0.5
    dominance: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "valence", _clamp_unit(self.valence))
        object.__setattr__(self, "arousal", _clamp_unit(self.arousal))
        object.__setattr__(self, "dominance", _clamp_unit(self.dominance))

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary."""
        return {
            "valence": self.valence,
            "arousal": self.arousal,
            "dominance": self.dominance,
        }


@dataclass(frozen=True)
class Sentiment:
    """Sentiment record."""

    polarity: SentimentPolarity = SentimentPolarity.NEUTRAL
    strength: float = 0.5

    def __post_init__(self):
        object.__setattr__(self, "polarity", SentimentPolarity(self.polarity))
        object.__setattr__(self, "strength", _clamp_unit(self.strength))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "polarity": self.polarity.value,
            "strength": self.strength,
        }


# =============================================================================
# Emotional Profile
# =============================================================================


@dataclass(frozen=True)
class EmotionalProfile:
    """
    Emotional data attached to one word.

    The category distribution is re-keyed into CATEGORY_ORDER and must sum
    to 1.0 within PROBABILITY_TOLERANCE. Both mappings are stored read-only,
    and profiles hash by distribution, VAD and sentiment. Use
    ``lexicon.profile_from_payload`` for untrusted input that may need
    coercion or renormalization.
    """

    emotions: Mapping[str, float]
    vad: VAD = field(default_factory=VAD)
    sentiment: Sentiment = field(default_factory=Sentiment)

    # Lexicon extras (pos tags, social axes, toxicity, flip probabilities)
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        unknown = set(self.emotions) - set(CATEGORY_ORDER)
        if unknown:
            raise ProfileValidationError(
                f"Unknown emotion categories: {sorted(unknown)}"
            )

        ordered: Dict[str, float] = {}
        for category in CATEGORY_ORDER:
            value = float(self.emotions.get(category, 0.0))
            if math.isnan(value) or value < 0.0 or value > 1.0:
                raise ProfileValidationError(
                    f"Probability for {category!r} out of range: {value}"
                )
            ordered[category] = value

        total = sum(ordered.values())
        if abs(total - 1.0) > PROBABILITY_TOLERANCE:
            raise ProfileValidationError(
                f"Emotion probabilities must sum to 1.0, got {total:.4f}"
            )

        object.__setattr__(self, "emotions", MappingProxyType(ordered))
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __hash__(self) -> int:
        return hash((tuple(self.emotions.values()), self.vad, self.sentiment))

    @property
    def dominant_emotion(self) -> str:
        """Category with the highest probability."""
        return dominant_category(self.emotions)[0]

    @property
    def confidence(self) -> float:
        """Highest single-category probability."""
        return dominant_category(self.emotions)[1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the inference/seed wire shape."""
        data = {
            "emotion_probs": dict(self.emotions),
            "vad": self.vad.to_dict(),
            "sentiment": self.sentiment.to_dict(),
        }
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data


# =============================================================================
# Word Analysis
# =============================================================================


class Provenance(str, Enum):
    """Tier that produced a word resolution."""

    CACHE = "cache"
    STORE = "store"
    INFERENCE = "inference"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class WordAnalysis:
    """Resolution outcome for one token of a text."""

    token: str
    normalized: str
    profile: Optional[EmotionalProfile] = None
    provenance: Provenance = Provenance.NOT_FOUND

    @property
    def found(self) -> bool:
        return self.profile is not None

    @property
    def confidence(self) -> float:
        return self.profile.confidence if self.profile else 0.0

    @property
    def dominant_emotion(self) -> Optional[str]:
        return self.profile.dominant_emotion if self.profile else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "word": self.token,
            "clean_word": self.normalized,
            "found": self.found,
            "source": self.provenance.value,
            "emotion": self.dominant_emotion or NEUTRAL_LABEL,
            "confidence": self.confidence,
        }
        if self.profile:
            data["valence"] = self.profile.vad.valence
            data["arousal"] = self.profile.vad.arousal
            data["sentiment"] = self.profile.sentiment.polarity.value
            data["emotion_probs"] = dict(self.profile.emotions)
        return data


# =============================================================================
# Text Result
# =============================================================================


class ProcessingMethod(str, Enum):
    """How a TextResult was produced."""

    WEIGHTED = "weighted"
    NEUTRAL_FALLBACK = "neutral_fallback"


@dataclass(frozen=True)
class TextResult:
    """Aggregated emotional signal for one block of text."""

    overall_emotion: str
    confidence: float
    emotions: Dict[str, float]
    word_analysis: Tuple[WordAnalysis, ...] = ()
    word_count: int = 0
    analyzed_words: int = 0
    coverage: float = 0.0
    vad: VAD = field(default_factory=VAD)
    sentiment: Sentiment = field(default_factory=Sentiment)
    processing_method: ProcessingMethod = ProcessingMethod.WEIGHTED
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        object.__setattr__(self, "word_analysis", tuple(self.word_analysis))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "overall_emotion": self.overall_emotion,
            "confidence": self.confidence,
            "emotions": dict(self.emotions),
            "word_analysis": [w.to_dict() for w in self.word_analysis],
            "word_count": self.word_count,
            "analyzed_words": self.analyzed_words,
            "coverage": self.coverage,
            "vad": self.vad.to_dict(),
            "sentiment": self.sentiment.to_dict(),
            "processing_method": self.processing_method.value,
            "created_at": self.created_at.isoformat(),
        }


# =============================================================================
# Session Summary
# =============================================================================


class SessionStatus(str, Enum):
    """Mood session lifecycle states."""

    ACTIVE = "active"
    ENDED = "ended"


@dataclass(frozen=True)
class SessionSummary:
    """Longitudinal mood summary for an ended session."""

    session_id: str
    messages: Tuple[TextResult, ...]
    dominant_mood: str
    mood_confidence: float
    emotions: Dict[str, float]
    vad: VAD
    trend: SentimentTrend
    message_count: int
    duration_seconds: float = 0.0
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, "messages", tuple(self.messages))

    def to_dict(self, include_messages: bool = False) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "session_id": self.session_id,
            "dominant_mood": self.dominant_mood,
            "mood_confidence": self.mood_confidence,
            "emotions": dict(self.emotions),
            "vad": self.vad.to_dict(),
            "trend": self.trend.value,
            "message_count": self.message_count,
            "duration_seconds": self.duration_seconds,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
        }
        if include_messages:
            data["messages"] = [m.to_dict() for m in self.messages]
        return data


# =============================================================================
# Analysis Log Record
# =============================================================================


@dataclass
class AnalysisLogRecord:
    """One entry of the append-only analysis log."""

    input_text: str
    result: TextResult
    processing_time_ms: int = 0
    inference_calls: int = 0
    new_words_added: int = 0
    request_id: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the column layout of the log table."""
        return {
            "request_id": self.request_id,
            "input_text": self.input_text,
            "word_count": self.result.word_count,
            "analyzed_words": self.result.analyzed_words,
            "overall_emotion": self.result.overall_emotion,
            "confidence": self.result.confidence,
            "emotions": dict(self.result.emotions),
            "word_analysis": [w.to_dict() for w in self.result.word_analysis],
            "vad": self.result.vad.to_dict(),
            "sentiment": self.result.sentiment.to_dict(),
            "processing_time_ms": self.processing_time_ms,
            "inference_calls": self.inference_calls,
            "new_words_added": self.new_words_added,
        }


def mean(values: Iterable[float], default: float = 0.5) -> float:
    """Arithmetic mean, or ``default`` for an empty iterable."""
    items: List[float] = list(values)
    if not items:
        return default
    return sum(items) / len(items)


# =============================================================================
# Exceptions
# =============================================================================


class CircuitEmotionError(Exception):
    """Base exception for emotion engine errors."""
    pass


class ProfileValidationError(CircuitEmotionError):
    """Profile payload does not match the expected shape."""
    pass


class InvalidTextError(CircuitEmotionError):
    """Text is empty or exceeds the configured length limit."""
    pass


class SessionError(CircuitEmotionError):
    """Base exception for mood session errors."""
    pass


class SessionNotFoundError(SessionError):
    """No session with the given id."""
    pass


class SessionStateError(SessionError):
    """Operation not allowed in the session's current state."""
    pass


class SessionAlreadyEndedError(SessionStateError):
    """Session was already ended; its summary is final."""
    pass


# =============================================================================
# Exports
# =============================================================================


__all__ = [
    # Categories
    "EmotionCategory",
    "CATEGORY_ORDER",
    "NEUTRAL_LABEL",
    "UNIFORM_WEIGHT",
    "PROBABILITY_TOLERANCE",
    "uniform_distribution",
    "dominant_category",
    "mean",
    # Sentiment and VAD
    "SentimentPolarity",
    "SentimentTrend",
    "VAD",
    "Sentiment",
    # Profiles and analyses
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
]
