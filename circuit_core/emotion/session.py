"""
Mood Sessions

Longitudinal mood tracking over a sequence of analyzed messages.

- SessionAggregator: recency-weighted summary and valence trend
- MoodSession: active -> ended lifecycle; the summary is computed once
- SessionRegistry: in-memory sessions keyed by id
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional, Sequence

import structlog

from .base import (
    CATEGORY_ORDER,
    NEUTRAL_LABEL,
    UNIFORM_WEIGHT,
    VAD,
    SentimentTrend,
    SessionAlreadyEndedError,
    SessionNotFoundError,
    SessionStateError,
    SessionStatus,
    SessionSummary,
    TextResult,
    dominant_category,
    mean,
    uniform_distribution,
)


logger = structlog.get_logger(__name__)


TREND_MIN_MESSAGES = 4
TREND_THRESHOLD = 0.1


# =============================================================================
# Aggregation
# =============================================================================


def recency_weights(n: int) -> List[float]:
    """Normalized weights ``1 + i/n``; later messages weigh more."""
    if n <= 0:
        return []
    raw = [1.0 + i / n for i in range(n)]
    total = sum(raw)
    return [w / total for w in raw]


def classify_trend(valences: Sequence[float]) -> SentimentTrend:
    """Compare mean valence of the second half against the first half."""
    if len(valences) < TREND_MIN_MESSAGES:
        return SentimentTrend.STABLE

    mid = len(valences) // 2
    diff = mean(valences[mid:]) - mean(valences[:mid])
    if diff > TREND_THRESHOLD:
        return SentimentTrend.IMPROVING
    if diff < -TREND_THRESHOLD:
        return SentimentTrend.DECLINING
    return SentimentTrend.STABLE


class SessionAggregator:
    """Builds a SessionSummary from ordered TextResults, oldest first."""

    def summarize(
        self,
        session_id: str,
        messages: Sequence[TextResult],
        started_at: Optional[datetime] = None,
        ended_at: Optional[datetime] = None,
    ) -> SessionSummary:
        messages = list(messages)
        duration = 0.0
        if messages and started_at and ended_at:
            duration = max(0.0, (ended_at - started_at).total_seconds())

        if not messages:
            return SessionSummary(
                session_id=session_id,
                messages=(),
                dominant_mood=NEUTRAL_LABEL,
                mood_confidence=UNIFORM_WEIGHT,
                emotions=uniform_distribution(),
                vad=VAD(0.5, 0.5, 0.5),
                trend=SentimentTrend.STABLE,
                message_count=0,
                duration_seconds=0.0,
                started_at=started_at,
                ended_at=ended_at,
            )

        weights = recency_weights(len(messages))

        emotions: Dict[str, float] = {category: 0.0 for category in CATEGORY_ORDER}
        valence = arousal = dominance = 0.0
        for weight, message in zip(weights, messages):
            for category in CATEGORY_ORDER:
                emotions[category] += weight * message.emotions.get(category, 0.0)
            valence += weight * message.vad.valence
            arousal += weight * message.vad.arousal
            dominance += weight * message.vad.dominance

        mood, confidence = dominant_category(emotions)

        return SessionSummary(
            session_id=session_id,
            messages=tuple(messages),
            dominant_mood=mood,
            mood_confidence=confidence,
            emotions=emotions,
            vad=VAD(valence, arousal, dominance),
            trend=classify_trend([m.vad.valence for m in messages]),
            message_count=len(messages),
            duration_seconds=duration,
            started_at=started_at,
            ended_at=ended_at,
        )


# =============================================================================
# Session Lifecycle
# =============================================================================


class MoodSession:
    """A single mood session."""

    def __init__(
        self,
        session_id: Optional[str] = None,
        aggregator: Optional[SessionAggregator] = None,
    ):
        self.session_id = session_id or str(uuid.uuid4())
        self.status = SessionStatus.ACTIVE
        self.started_at = datetime.utcnow()
        self.ended_at: Optional[datetime] = None
        self.summary: Optional[SessionSummary] = None

        self._aggregator = aggregator or SessionAggregator()
        self._messages: List[TextResult] = []

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def messages(self) -> List[TextResult]:
        return list(self._messages)

    def add_message(self, result: TextResult) -> None:
        if not self.is_active:
            raise SessionStateError(f"Session {self.session_id} has ended")
        self._messages.append(result)

    def end(self, ended_at: Optional[datetime] = None) -> SessionSummary:
        """
        Transition to ENDED and compute the summary.

        Raises:
            SessionAlreadyEndedError: if the session was already ended
        """
        if not self.is_active:
            raise SessionAlreadyEndedError(f"Session {self.session_id} already ended")

        self.ended_at = ended_at or datetime.utcnow()
        self.summary = self._aggregator.summarize(
            self.session_id,
            self._messages,
            started_at=self.started_at,
            ended_at=self.ended_at,
        )
        self.status = SessionStatus.ENDED

        logger.info(
            "session_ended",
            session_id=self.session_id,
            message_count=self.summary.message_count,
            dominant_mood=self.summary.dominant_mood,
            trend=self.summary.trend.value,
        )
        return self.summary

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "session_id": self.session_id,
            "status": self.status.value,
            "message_count": len(self._messages),
            "started_at": self.started_at.isoformat(),
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "summary": self.summary.to_dict() if self.summary else None,
        }


class SessionRegistry:
    """In-memory sessions keyed by id."""

    def __init__(self, aggregator: Optional[SessionAggregator] = None):
        self._aggregator = aggregator or SessionAggregator()
        self._sessions: Dict[str, MoodSession] = {}

    @property
    def active_count(self) -> int:
        return sum(1 for s in self._sessions.values() if s.is_active)

    def start(self, session_id: Optional[str] = None) -> MoodSession:
        if session_id is not None and session_id in self._sessions:
            raise SessionStateError(f"Session {session_id} already exists")

        session = MoodSession(session_id=session_id, aggregator=self._aggregator)
        self._sessions[session.session_id] = session
        logger.info("session_started", session_id=session.session_id)
        return session

    def get(self, session_id: str) -> MoodSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return session

    def add_message(self, session_id: str, result: TextResult) -> None:
        self.get(session_id).add_message(result)

    def end(self, session_id: str) -> SessionSummary:
        return self.get(session_id).end()


__all__ = [
    "TREND_MIN_MESSAGES",
    "TREND_THRESHOLD",
    "recency_weights",
    "classify_trend",
    "SessionAggregator",
    "MoodSession",
    "SessionRegistry",
]
