"""
Emotion Analysis Service

Owns the resolver, aggregators, session registry and log worker, and turns
raw text into TextResults.
"""

import time
import uuid
from typing import Any, Dict, Optional

import structlog

from ..config import EngineConfig
from ..core.logging import LogContext
from ..database.base import DatabaseManager
from ..database.stores import SqlAnalysisLogStore, SqlProfileStore
from ..inference.base import InferenceClient
from ..inference.providers import create_inference_client
from .aggregator import TextAggregator
from .base import (
    AnalysisLogRecord,
    InvalidTextError,
    SessionStateError,
    SessionSummary,
    TextResult,
)
from .lexicon import tokenize
from .log_worker import AnalysisLogWorker
from .resolver import WordResolver
from .session import MoodSession, SessionRegistry
from .stores import ProfileStore


logger = structlog.get_logger(__name__)


class EmotionAnalysisService:
    """
    Text and session analysis.

    Usage:
        service = EmotionAnalysisService.from_config(EngineConfig.from_env())
        async with service:
            result = await service.analyze_text("what a wonderful day")
    """

    def __init__(
        self,
        store: ProfileStore,
        inference: Optional[InferenceClient] = None,
        config: Optional[EngineConfig] = None,
        log_worker: Optional[AnalysisLogWorker] = None,
        aggregator: Optional[TextAggregator] = None,
        sessions: Optional[SessionRegistry] = None,
        db: Optional[DatabaseManager] = None,
    ):
        self.config = config or EngineConfig()
        self.store = store
        self.inference = inference
        self.log_worker = log_worker
        self.db = db

        self.resolver = WordResolver(
            store,
            inference=inference,
            max_inference_per_text=self.config.max_inference_per_text,
            persist_mode=self.config.persist_mode,
        )
        self.aggregator = aggregator or TextAggregator(
            significance_threshold=self.config.significance_threshold,
        )
        self.sessions = sessions or SessionRegistry()

        self._texts_analyzed = 0

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None) -> "EmotionAnalysisService":
        """Wire SQL stores, the inference client and the log worker from config."""
        config = config or EngineConfig.from_env()
        db = DatabaseManager(
            config.database_url,
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
        )

        log_worker = None
        if config.analysis_logging_enabled:
            log_worker = AnalysisLogWorker(
                SqlAnalysisLogStore(db),
                queue_size=config.log_queue_size,
            )

        return cls(
            store=SqlProfileStore(db),
            inference=create_inference_client(config),
            config=config,
            log_worker=log_worker,
            db=db,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self, create_tables: bool = False) -> None:
        if create_tables and self.db is not None:
            await self.db.create_all()
        if self.log_worker is not None:
            await self.log_worker.start()
        logger.info(
            "emotion_service_started",
            inference_available=self.inference is not None,
            persist_mode=self.config.persist_mode.value,
        )

    async def stop(self) -> None:
        if self.log_worker is not None:
            await self.log_worker.stop()
        if self.inference is not None:
            await self.inference.aclose()
        if self.db is not None:
            await self.db.close()
        logger.info("emotion_service_stopped", texts_analyzed=self._texts_analyzed)

    async def __aenter__(self) -> "EmotionAnalysisService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def validate_text(self, text: Any) -> str:
        if not isinstance(text, str) or not text.strip():
            raise InvalidTextError("Text is required")
        if len(text) > self.config.max_text_length:
            raise InvalidTextError(
                f"Text exceeds maximum length of {self.config.max_text_length} characters"
            )
        return text

    async def analyze_text(
        self,
        text: str,
        session_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> TextResult:
        """
        Analyze one block of text.

        Raises:
            InvalidTextError: if the text is empty or too long
            SessionNotFoundError: if ``session_id`` is unknown
            SessionStateError: if the session has ended
        """
        text = self.validate_text(text)

        session = None
        if session_id is not None:
            session = self.sessions.get(session_id)
            if not session.is_active:
                raise SessionStateError(f"Session {session_id} has ended")

        request_id = request_id or uuid.uuid4().hex

        start_time = time.time()
        with LogContext(request_id=request_id):
            analyses, stats = await self.resolver.resolve_tokens(tokenize(text))
            result = self.aggregator.aggregate(analyses)
        processing_time_ms = int((time.time() - start_time) * 1000)

        if session is not None:
            session.add_message(result)

        self._texts_analyzed += 1

        if self.log_worker is not None:
            self.log_worker.submit(
                AnalysisLogRecord(
                    input_text=text,
                    result=result,
                    processing_time_ms=processing_time_ms,
                    inference_calls=stats.inference_calls,
                    new_words_added=stats.new_words_added,
                    request_id=request_id,
                )
            )

        logger.info(
            "text_analyzed",
            request_id=request_id,
            emotion=result.overall_emotion,
            confidence=round(result.confidence, 4),
            word_count=result.word_count,
            analyzed_words=result.analyzed_words,
            inference_calls=stats.inference_calls,
            processing_time_ms=processing_time_ms,
        )
        return result

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def start_session(self, session_id: Optional[str] = None) -> MoodSession:
        return self.sessions.start(session_id)

    def get_session(self, session_id: str) -> MoodSession:
        return self.sessions.get(session_id)

    def end_session(self, session_id: str) -> SessionSummary:
        return self.sessions.end(session_id)

    # -------------------------------------------------------------------------
    # Stats
    # -------------------------------------------------------------------------

    async def get_stats(self) -> Dict[str, Any]:
        """Lexicon size and runtime counters."""
        stats: Dict[str, Any] = {
            "total_words": await self.store.count_words(),
            "cached_words": self.resolver.cache_size,
            "inference_available": self.inference is not None,
            "texts_analyzed": self._texts_analyzed,
            "active_sessions": self.sessions.active_count,
        }
        if self.log_worker is not None:
            stats["analysis_log"] = self.log_worker.to_dict()
        return stats


__all__ = [
    "EmotionAnalysisService",
]
