"""
FastAPI dependency injection for database sessions.
Provides database session dependencies for API endpoints.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.session import get_session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides an async database session.

    Usage:
        @router.get("/events")
        async def list_events(db: AsyncSession = Depends(get_db)):
            return await event_service.list_open_events(db)

    Yields:
        AsyncSession: SQLAlchemy async database session

    Ensures:
        - Session is automatically closed after the request
        - Uncommitted work is rolled back
    """
    session = get_session_factory()()
    try:
        yield session
    finally:
        await session.close()
