"""
Relational persistence for the word lexicon and the analysis log.
"""

from .base import DATABASE_ERRORS, Base, DatabaseManager, TimestampMixin, to_async_url
from .models import ProcessingLogModel, WordProfileModel
from .repositories import BaseRepository, ProcessingLogRepository, WordRepository
from .stores import SqlAnalysisLogStore, SqlProfileStore

__all__ = [
    "Base",
    "TimestampMixin",
    "DatabaseManager",
    "to_async_url",
    "DATABASE_ERRORS",
    "WordProfileModel",
    "ProcessingLogModel",
    "BaseRepository",
    "WordRepository",
    "ProcessingLogRepository",
    "SqlProfileStore",
    "SqlAnalysisLogStore",
]
