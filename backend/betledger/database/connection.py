"""
Database lifecycle helpers.

This module provides:
- Table creation at startup
- Engine disposal at shutdown
- Health check utilities
"""

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from betledger.config import settings
from betledger.database.base import Base
from betledger.database.session import dispose_engine, get_engine

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """
    Create all tables that do not exist yet.
    Importing the models package registers every table on Base.metadata.
    """
    import betledger.models  # noqa: F401

    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ready")


async def close_db() -> None:
    """
    Dispose the engine and its connection pool.
    """
    await dispose_engine()


async def check_db_connection() -> bool:
    """
    Check if the database connection is healthy.
    """
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database health check failed: {e}")
        return False


def get_db_info() -> dict:
    """
    Get database connection information.
    """
    return {
        "url": _sanitize_database_url(settings.database_url),
        "environment": settings.environment,
    }


def _sanitize_database_url(url: str) -> str:
    """
    Hide password in a database URL for safe logging.
    """
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" in credentials:
        username = credentials.split(":", 1)[0]
        return f"{protocol}://{username}:***@{host}"
    return url
