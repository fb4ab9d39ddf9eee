"""
Database Models

SQLAlchemy models for the word lexicon and the per-text processing log.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..emotion.base import (
    CATEGORY_ORDER,
    VAD,
    EmotionalProfile,
    Sentiment,
    SentimentPolarity,
)
from .base import Base, TimestampMixin


# =============================================================================
# Word Lexicon
# =============================================================================


class WordProfileModel(Base, TimestampMixin):
    """One word and its emotional profile."""

    __tablename__ = "words"

    word: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    emotion_joy: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_trust: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_anticipation: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_surprise: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_anger: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_fear: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_sadness: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)
    emotion_disgust: Mapped[float] = mapped_column(Float, default=0.125, nullable=False)

    valence: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    arousal: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)
    dominance: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)

    sentiment_polarity: Mapped[str] = mapped_column(String(20), default="neutral", nullable=False)
    sentiment_strength: Mapped[float] = mapped_column(Float, default=0.5, nullable=False)

    # Named lexicon_metadata because `metadata` is reserved on declarative models
    lexicon_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    @staticmethod
    def columns_from_profile(word: str, profile: EmotionalProfile) -> Dict[str, Any]:
        """Flatten a profile into column values."""
        values: Dict[str, Any] = {"word": word}
        for category in CATEGORY_ORDER:
            values[f"emotion_{category}"] = profile.emotions[category]
        values.update(
            valence=profile.vad.valence,
            arousal=profile.vad.arousal,
            dominance=profile.vad.dominance,
            sentiment_polarity=profile.sentiment.polarity.value,
            sentiment_strength=profile.sentiment.strength,
            lexicon_metadata=dict(profile.metadata) or None,
        )
        return values

    def to_profile(self) -> EmotionalProfile:
        """Rebuild the domain profile from this row."""
        emotions = {
            category: float(getattr(self, f"emotion_{category}") or 0.0)
            for category in CATEGORY_ORDER
        }
        total = sum(emotions.values())
        if total > 0 and abs(total - 1.0) > 1e-9:
            # Rows written by other tools may drift slightly off 1.0
            emotions = {c: v / total for c, v in emotions.items()}

        try:
            polarity = SentimentPolarity(self.sentiment_polarity)
        except ValueError:
            polarity = SentimentPolarity.NEUTRAL

        return EmotionalProfile(
            emotions=emotions,
            vad=VAD(
                valence=self.valence,
                arousal=self.arousal,
                dominance=self.dominance,
            ),
            sentiment=Sentiment(polarity=polarity, strength=self.sentiment_strength),
            metadata=dict(self.lexicon_metadata or {}),
        )


# =============================================================================
# Processing Log
# =============================================================================


class ProcessingLogModel(Base, TimestampMixin):
    """Append-only record of one text analysis."""

    __tablename__ = "api_processing_logs"

    request_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    input_text: Mapped[str] = mapped_column(Text, nullable=False)

    word_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    analyzed_words: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    overall_emotion: Mapped[str] = mapped_column(String(20), nullable=False)
    confidence: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    emotions: Mapped[Dict[str, float]] = mapped_column(JSON, default=dict)
    word_analysis: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    vad: Mapped[Dict[str, float]] = mapped_column(JSON, default=dict)
    sentiment: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)

    processing_time_ms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inference_calls: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    new_words_added: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index("ix_api_processing_logs_created", "created_at"),
        Index("ix_api_processing_logs_emotion", "overall_emotion"),
    )


__all__ = [
    "WordProfileModel",
    "ProcessingLogModel",
]
