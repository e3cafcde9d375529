"""
UserRepository

Operations for the 'users' table.

Specialized Methods:
- find_by_username(username): Login and uniqueness checks
- update_balance(user_id, delta, floor): Atomic conditional balance change
- set_balance(user_id, balance): Absolute balance override
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories.base import BaseRepository
from betledger.models import User


class UserRepository(BaseRepository[User]):
    model = User

    async def find_by_username(
        self, db: AsyncSession, username: str
    ) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def update_balance(
        self,
        db: AsyncSession,
        user_id: UUID,
        delta: Decimal,
    ) -> Optional[Decimal]:
        """
        Apply ``delta`` to the balance in a single UPDATE statement.

        Negative deltas only match while the balance covers them, so the
        check and the decrement happen atomically in the store. Both the
        comparison and the result are rounded to cents in SQL, since SQLite
        evaluates NUMERIC arithmetic in binary floating point. Returns the
        new balance, or None when no row matched (missing user or
        insufficient funds).
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(balance=func.round(User.balance + delta, 2))
            .returning(User.balance)
            .execution_options(synchronize_session="fetch")
        )
        if delta < 0:
            stmt = stmt.where(func.round(User.balance, 2) >= -delta)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def set_balance(
        self,
        db: AsyncSession,
        user_id: UUID,
        balance: Decimal,
    ) -> Optional[Decimal]:
        result = await db.execute(
            update(User)
            .where(User.id == user_id)
            .values(balance=balance)
            .returning(User.balance)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none()


user_repository = UserRepository()
