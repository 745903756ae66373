"""Database models and session management.

Import models from their respective modules:
    from app.db.sports import Match, Team, League
    from app.db.ads import AdCampaign, AdImage, AdEvent

Session management:
    from app.db import AsyncSession, get_db            # request-scoped (FastAPI)
    from app.db import get_async_session               # streams, tasks, scripts
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .base import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

from ..config import settings

# Engine and session factory are created on first use so tests can import
# routers and models without a reachable database.
_engine: "AsyncEngine | None" = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _get_engine() -> "AsyncEngine":
    global _engine
    if _engine is None:
        _engine = create_async_engine(
            settings.database_url, echo=settings.sql_echo, pool_pre_ping=True
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            _get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions with commit/rollback semantics."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Session outside the request cycle (SSE generators, Celery tasks, scripts)."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = [
    "Base",
    "AsyncSession",
    "get_db",
    "get_async_session",
    "get_session_factory",
    "close_db",
]
