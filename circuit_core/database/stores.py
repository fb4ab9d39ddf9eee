"""
SQL-backed store adapters.

Driver and schema errors are logged and converted into "not found" or
"write skipped"; the engine never sees them.
"""

from typing import Optional

import structlog

from ..emotion.base import AnalysisLogRecord, EmotionalProfile, ProfileValidationError
from ..emotion.stores import AnalysisLogStore, ProfileStore
from .base import DATABASE_ERRORS, DatabaseManager
from .repositories import ProcessingLogRepository, WordRepository


logger = structlog.get_logger(__name__)


class SqlProfileStore(ProfileStore):
    """ProfileStore over the ``words`` table."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def get_by_word(self, word: str) -> Optional[EmotionalProfile]:
        try:
            async with self.db.session() as session:
                row = await WordRepository(session).get_by_word(word)
                if row is None:
                    return None
                return row.to_profile()
        except DATABASE_ERRORS as e:
            logger.error("profile_store_lookup_failed", word=word, error=str(e))
            return None
        except ProfileValidationError as e:
            logger.warning("profile_store_invalid_row", word=word, error=str(e))
            return None

    async def upsert_word(
        self,
        word: str,
        profile: EmotionalProfile,
        overwrite: bool = False,
    ) -> bool:
        key = word.lower()
        try:
            async with self.db.session() as session:
                written = await WordRepository(session).upsert(key, profile, overwrite=overwrite)
        except DATABASE_ERRORS as e:
            logger.error("profile_store_write_failed", word=key, error=str(e))
            return False

        logger.debug("profile_store_upsert", word=key, written=written, overwrite=overwrite)
        return written

    async def count_words(self) -> int:
        try:
            async with self.db.session() as session:
                return await WordRepository(session).count()
        except DATABASE_ERRORS as e:
            logger.error("profile_store_count_failed", error=str(e))
            return 0


class SqlAnalysisLogStore(AnalysisLogStore):
    """AnalysisLogStore over the ``api_processing_logs`` table."""

    def __init__(self, db: DatabaseManager):
        self.db = db

    async def append(self, record: AnalysisLogRecord) -> None:
        async with self.db.session() as session:
            await ProcessingLogRepository(session).create(**record.to_row())


__all__ = [
    "SqlProfileStore",
    "SqlAnalysisLogStore",
]
