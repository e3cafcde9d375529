"""User account management service."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.config import settings
from betledger.database.repositories import bet_repository, user_repository
from betledger.exceptions import (
    InvalidAmount,
    InvalidRole,
    UserHasPendingBets,
    UsernameTaken,
    UserNotFound,
)
from betledger.models import User, UserRole
from betledger.services.auth_service import auth_service

logger = logging.getLogger(__name__)


def validate_role(role) -> str:
    value = getattr(role, "value", role)
    if value not in {r.value for r in UserRole}:
        raise InvalidRole(f"Invalid role {value!r}")
    return value


class UserService:
    """
    Manages user accounts. Balances are read here but only ever written
    through BalanceService.
    """

    async def create_user(
        self,
        db: AsyncSession,
        username: str,
        password: str,
        role: str = "player",
        balance: Optional[Decimal] = None,
    ) -> User:
        """Create a user with a hashed password and starting balance."""
        role = validate_role(role)
        if balance is None:
            balance = settings.initial_balance
        if balance < 0:
            raise InvalidAmount("Invalid balance amount")

        if await user_repository.find_by_username(db, username):
            raise UsernameTaken(f"Username {username} already exists")

        user = User(
            username=username,
            password_hash=auth_service.hash_password(password),
            role=role,
            balance=Decimal(balance),
        )
        try:
            await user_repository.insert(db, user)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise UsernameTaken(f"Username {username} already exists")

        logger.info(f"Created {role} user: {username}")
        return user

    async def get_user(self, db: AsyncSession, user_id: UUID) -> Optional[User]:
        """Fetch single user by ID."""
        return await user_repository.find_by_id(db, user_id)

    async def require_user(self, db: AsyncSession, user_id: UUID) -> User:
        user = await user_repository.find_by_id(db, user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found")
        return user

    async def get_user_by_username(
        self, db: AsyncSession, username: str
    ) -> Optional[User]:
        return await user_repository.find_by_username(db, username)

    async def list_users(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[User]:
        return await user_repository.find_many(db, limit=limit, offset=offset)

    async def update_user(self, db: AsyncSession, user_id: UUID, role: str) -> User:
        """Change a user's role. Usernames are immutable."""
        role = validate_role(role)
        user = await self.require_user(db, user_id)

        user.role = role
        await db.commit()
        await db.refresh(user)
        logger.info(f"Updated user {user.username}: role={role}")
        return user

    async def delete_user(self, db: AsyncSession, user_id: UUID) -> None:
        """Delete a user with no pending bets, along with their settled bets."""
        user = await self.require_user(db, user_id)
        if await bet_repository.count_pending_by_user(db, user_id):
            raise UserHasPendingBets(f"User {user.username} has pending bets")

        await bet_repository.delete_by_user(db, user_id)
        await user_repository.delete(db, user)
        await db.commit()
        logger.info(f"Deleted user: {user.username}")

    async def ensure_admin(self, db: AsyncSession, username: str, password: str) -> User:
        """Create the bootstrap admin account if it does not exist yet."""
        existing = await user_repository.find_by_username(db, username)
        if existing:
            return existing

        logger.info(f"Bootstrapping admin account: {username}")
        return await self.create_user(
            db, username, password, role="admin", balance=Decimal("0.00")
        )


# Singleton instance
user_service = UserService()
