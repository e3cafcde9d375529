"""
BetRepository

Operations for the 'bets' table (ledger).

Specialized Methods:
- find_by_event(event_id, status): Bets for settlement and admin views
- find_by_user(user_id): Player betting history
- update_status(bet_id, status, winnings): Conditional pending -> won/lost
- delete_pending(bet_id): Conditional delete used for refunds
- delete_by_user(user_id): Bet history removal on user deletion
- count_by_event(event_id) / count_pending_by_user(user_id): Delete guards
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from betledger.database.repositories.base import BaseRepository
from betledger.models import Bet
from betledger.models.base import utcnow


class BetRepository(BaseRepository[Bet]):
    model = Bet

    async def find_by_event(
        self,
        db: AsyncSession,
        event_id: UUID,
        status: Optional[str] = None,
        with_user: bool = False,
    ) -> list[Bet]:
        query = select(Bet).where(Bet.event_id == event_id)
        if status is not None:
            query = query.where(Bet.status == status)
        if with_user:
            query = query.options(selectinload(Bet.user))
        result = await db.execute(query.order_by(Bet.created_at))
        return list(result.scalars().all())

    async def find_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        with_event: bool = False,
    ) -> list[Bet]:
        query = select(Bet).where(Bet.user_id == user_id)
        if with_event:
            query = query.options(selectinload(Bet.event))
        result = await db.execute(query.order_by(Bet.created_at.desc()))
        return list(result.scalars().all())

    async def find_all(self, db: AsyncSession) -> list[Bet]:
        result = await db.execute(
            select(Bet)
            .options(selectinload(Bet.user), selectinload(Bet.event))
            .order_by(Bet.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        bet_id: UUID,
        status: str,
        winnings: Decimal,
    ) -> bool:
        """
        Resolve a pending bet.

        The WHERE clause pins the row to ``pending`` so a bet is resolved at
        most once even if two settlement passes overlap. Returns False when
        the bet was already resolved (or does not exist).
        """
        result = await db.execute(
            update(Bet)
            .where(Bet.id == bet_id)
            .where(Bet.status == "pending")
            .values(status=status, winnings=winnings, settled_at=utcnow())
            .returning(Bet.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none() is not None

    async def delete_pending(self, db: AsyncSession, bet_id: UUID) -> bool:
        """Delete a bet only while it is still pending."""
        result = await db.execute(
            delete(Bet)
            .where(Bet.id == bet_id)
            .where(Bet.status == "pending")
            .returning(Bet.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none() is not None

    async def delete_by_user(self, db: AsyncSession, user_id: UUID) -> int:
        """Remove a user's bet history. Returns the number of rows deleted."""
        result = await db.execute(
            delete(Bet)
            .where(Bet.user_id == user_id)
            .returning(Bet.id)
            .execution_options(synchronize_session="fetch")
        )
        return len(result.all())

    async def count_by_event(self, db: AsyncSession, event_id: UUID) -> int:
        result = await db.execute(
            select(func.count(Bet.id)).where(Bet.event_id == event_id)
        )
        return result.scalar_one()

    async def count_pending_by_user(self, db: AsyncSession, user_id: UUID) -> int:
        result = await db.execute(
            select(func.count(Bet.id))
            .where(Bet.user_id == user_id)
            .where(Bet.status == "pending")
        )
        return result.scalar_one()


bet_repository = BetRepository()
