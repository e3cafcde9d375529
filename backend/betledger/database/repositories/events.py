"""
EventRepository

Operations for the 'events' table.

Specialized Methods:
- find_by_id(event_id, for_update): Optional row lock for placement
- find_by_status(status): Open events listing
- find_closed_with_pending_bets(): Settlement recovery
- update_status(event_id, final_result): Conditional open -> closed transition
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories.base import BaseRepository
from betledger.models import Bet, Event
from betledger.models.base import utcnow


class EventRepository(BaseRepository[Event]):
    model = Event

    async def find_by_id(
        self,
        db: AsyncSession,
        id: UUID,
        for_update: bool = False,
    ) -> Optional[Event]:
        query = select(Event).where(Event.id == id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_status(self, db: AsyncSession, status: str) -> list[Event]:
        result = await db.execute(
            select(Event)
            .where(Event.status == status)
            .order_by(Event.created_at.desc())
        )
        return list(result.scalars().all())

    async def find_closed_with_pending_bets(self, db: AsyncSession) -> list[Event]:
        pending = (
            select(Bet.id)
            .where(Bet.event_id == Event.id)
            .where(Bet.status == "pending")
            .exists()
        )
        result = await db.execute(
            select(Event)
            .where(Event.status == "closed")
            .where(pending)
            .order_by(Event.closed_at)
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        event_id: UUID,
        final_result: str,
    ) -> bool:
        """
        Close an open event and record its final result.

        Only matches while the event is still open, so the result is written
        exactly once. Returns False when nothing matched.
        """
        result = await db.execute(
            update(Event)
            .where(Event.id == event_id)
            .where(Event.status == "open")
            .values(
                status="closed",
                final_result=final_result,
                closed_at=utcnow(),
            )
            .returning(Event.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none() is not None


event_repository = EventRepository()
