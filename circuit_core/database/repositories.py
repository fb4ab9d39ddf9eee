"""
Database Repositories

Repository pattern implementation for lexicon and processing-log access.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import desc, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from ..emotion.base import EmotionalProfile
from .base import Base
from .models import ProcessingLogModel, WordProfileModel


# =============================================================================
# Generic Type Variable
# =============================================================================


ModelType = TypeVar("ModelType", bound=Base)


# =============================================================================
# Base Repository
# =============================================================================


class BaseRepository(Generic[ModelType]):
    """Base repository with common CRUD operations."""

    model: Type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> ModelType:
        """Create a new entity."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def count(self) -> int:
        """Count all entities."""
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar_one()


# =============================================================================
# Word Repository
# =============================================================================


class WordRepository(BaseRepository[WordProfileModel]):
    """Repository for the word lexicon."""

    model = WordProfileModel

    async def get_by_word(self, word: str) -> Optional[WordProfileModel]:
        """Case-insensitive exact match."""
        result = await self.session.execute(
            select(WordProfileModel)
            .where(func.lower(WordProfileModel.word) == word.lower())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        word: str,
        profile: EmotionalProfile,
        overwrite: bool = False,
    ) -> bool:
        """
        Insert a word, or update it when ``overwrite`` is set.

        Uses native ON CONFLICT on PostgreSQL and SQLite; other dialects fall
        back to select-then-write.

        Returns:
            True if a row was inserted or updated
        """
        values = WordProfileModel.columns_from_profile(word, profile)
        dialect = self.session.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = postgresql.insert(WordProfileModel).values(**values)
        elif dialect == "sqlite":
            stmt = sqlite.insert(WordProfileModel).values(**values)
        else:
            return await self._upsert_generic(word, values, overwrite)

        if overwrite:
            updates = {k: v for k, v in values.items() if k != "word"}
            updates["updated_at"] = datetime.utcnow()
            stmt = stmt.on_conflict_do_update(
                index_elements=[WordProfileModel.word],
                set_=updates,
            )
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=[WordProfileModel.word])

        result = await self.session.execute(stmt)
        return (result.rowcount or 0) > 0

    async def _upsert_generic(
        self,
        word: str,
        values: Dict[str, Any],
        overwrite: bool,
    ) -> bool:
        existing = await self.get_by_word(word)
        if existing is None:
            await self.create(**values)
            return True
        if not overwrite:
            return False

        for key, value in values.items():
            setattr(existing, key, value)
        await self.session.flush()
        return True

    async def list_words(self, skip: int = 0, limit: int = 100) -> List[WordProfileModel]:
        """List words alphabetically."""
        result = await self.session.execute(
            select(WordProfileModel)
            .order_by(WordProfileModel.word)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())


# =============================================================================
# Processing Log Repository
# =============================================================================


class ProcessingLogRepository(BaseRepository[ProcessingLogModel]):
    """Repository for the append-only analysis log."""

    model = ProcessingLogModel

    async def get_recent(self, limit: int = 20) -> List[ProcessingLogModel]:
        """Most recent log entries first."""
        result = await self.session.execute(
            select(ProcessingLogModel)
            .order_by(desc(ProcessingLogModel.created_at))
            .limit(limit)
        )
        return list(result.scalars().all())


__all__ = [
    "BaseRepository",
    "WordRepository",
    "ProcessingLogRepository",
]
