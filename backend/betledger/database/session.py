"""
Database engine and session management.
Provides reusable async session handling for the API and scripts.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from betledger.config import settings

logger = logging.getLogger(__name__)

# Async engine and session factory
_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _engine_kwargs(url: str) -> dict:
    """Pool options; SQLite drivers do not take pool sizing arguments."""
    if url.startswith("sqlite"):
        return {"connect_args": {"timeout": 30}}
    return {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def configure_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> AsyncEngine:
    """Create the async engine and session factory, replacing any existing ones."""
    global _async_engine, _async_session_factory

    url = url or settings.database_url
    _async_engine = create_async_engine(
        url,
        echo=settings.db_echo if echo is None else echo,
        **_engine_kwargs(url),
    )
    _async_session_factory = async_sessionmaker(
        bind=_async_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )
    return _async_engine


def get_engine() -> AsyncEngine:
    """Get or create async engine."""
    if _async_engine is None:
        configure_engine()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create async session factory."""
    if _async_session_factory is None:
        configure_engine()
    return _async_session_factory


async def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _async_engine, _async_session_factory
    if _async_engine is not None:
        await _async_engine.dispose()
    _async_engine = None
    _async_session_factory = None


@asynccontextmanager
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Async context manager for database sessions outside of FastAPI.

    Usage:
        async with get_db_session() as db:
            result = await db.execute(select(User))
            await db.commit()

    Yields:
        AsyncSession: SQLAlchemy async database session
    """
    session = get_session_factory()()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
