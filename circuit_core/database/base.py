"""
Database Base Module

Declarative base, timestamp mixin and async engine/session management for
the word lexicon and the analysis log.
"""

import asyncio
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator, Optional

from sqlalchemy import DateTime, String, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# =============================================================================
# Base Declarative Class
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )


# =============================================================================
# Mixins
# =============================================================================


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


# =============================================================================
# Database Manager
# =============================================================================


# Raised by drivers when the server is unreachable; asyncpg connect errors are
# not wrapped by SQLAlchemy.
DATABASE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def to_async_url(database_url: str) -> str:
    """Rewrite a sync driver URL to its async driver."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


class DatabaseManager:
    """
    Database connection and session management.

    Handles connection pooling, session creation, and lifecycle.
    """

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 1800,
        echo: bool = False,
    ):
        """
        Initialize database manager.

        Args:
            database_url: Database connection URL
            pool_size: Size of connection pool
            max_overflow: Max connections beyond pool size
            pool_timeout: Timeout for acquiring connection
            pool_recycle: Recycle connections after this many seconds
            echo: Echo SQL statements (for debugging)
        """
        self._database_url = to_async_url(database_url)
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._pool_timeout = pool_timeout
        self._pool_recycle = pool_recycle
        self._echo = echo

        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def is_sqlite(self) -> bool:
        return self._database_url.startswith("sqlite")

    @property
    def engine(self) -> AsyncEngine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.is_sqlite:
                # SQLite uses a static/null pool; sizing arguments are rejected
                self._engine = create_async_engine(
                    self._database_url,
                    echo=self._echo,
                )
            else:
                self._engine = create_async_engine(
                    self._database_url,
                    pool_size=self._pool_size,
                    max_overflow=self._max_overflow,
                    pool_timeout=self._pool_timeout,
                    pool_recycle=self._pool_recycle,
                    echo=self._echo,
                )
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                bind=self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a database session.

        Usage:
            async with db.session() as session:
                # use session
        """
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create all tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except DATABASE_ERRORS:
            return False

    async def close(self) -> None:
        """Close the database connection."""
        if self._engine:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


# =============================================================================
# Exports
# =============================================================================


__all__ = [
    "Base",
    "TimestampMixin",
    "DatabaseManager",
    "to_async_url",
    "DATABASE_ERRORS",
]
