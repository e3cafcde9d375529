"""User balance management service."""

import logging
from decimal import Decimal, InvalidOperation
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories import user_repository
from betledger.exceptions import InsufficientBalance, InvalidAmount, UserNotFound

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """
    Coerce a numeric value to a positive Decimal in whole cents.
    Values with sub-cent precision are rejected, never rounded.
    """
    if isinstance(value, bool):
        raise InvalidAmount()
    try:
        raw = Decimal(str(value))
        amount = raw.quantize(CENTS)
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidAmount()
    if not amount.is_finite() or amount <= 0 or amount != raw:
        raise InvalidAmount()
    return amount


class BalanceService:
    """
    Sole writer of user balances.

    Every mutation is one conditional UPDATE in the store, so concurrent
    debits against the same user can never both spend the same funds.
    Methods flush but never commit; the caller owns the transaction.
    """

    async def get_balance(self, db: AsyncSession, user_id: UUID) -> Decimal:
        user = await user_repository.find_by_id(db, user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found")
        return user.balance

    async def check_sufficient_balance(
        self,
        db: AsyncSession,
        user_id: UUID,
        amount: Decimal,
    ) -> bool:
        """True if the user can cover ``amount``. False on any lookup failure."""
        try:
            user = await user_repository.find_by_id(db, user_id)
            return user is not None and user.balance >= amount
        except (SQLAlchemyError, TypeError) as e:
            logger.warning(f"Balance check failed for user {user_id}: {e}")
            return False

    async def debit(
        self,
        db: AsyncSession,
        user_id: UUID,
        amount: Decimal,
    ) -> Decimal:
        """Decrement-if-sufficient. Returns the updated balance."""
        amount = to_money(amount)
        new_balance = await user_repository.update_balance(db, user_id, -amount)
        if new_balance is None:
            if await user_repository.find_by_id(db, user_id) is None:
                raise UserNotFound(f"User {user_id} not found")
            raise InsufficientBalance(
                f"Insufficient balance for debit of ${amount}",
                user_id=str(user_id),
                amount=str(amount),
            )

        logger.debug(f"Debited ${amount} from user {user_id} (balance ${new_balance})")
        return new_balance

    async def credit(
        self,
        db: AsyncSession,
        user_id: UUID,
        amount: Decimal,
    ) -> Decimal:
        """Add ``amount`` to the balance. Returns the updated balance."""
        amount = to_money(amount)
        new_balance = await user_repository.update_balance(db, user_id, amount)
        if new_balance is None:
            raise UserNotFound(f"User {user_id} not found")

        logger.debug(f"Credited ${amount} to user {user_id} (balance ${new_balance})")
        return new_balance

    async def set_balance(
        self,
        db: AsyncSession,
        user_id: UUID,
        balance: Decimal,
    ) -> Decimal:
        """Admin override of the absolute balance."""
        if isinstance(balance, bool):
            raise InvalidAmount("Invalid balance amount")
        try:
            raw = Decimal(str(balance))
            balance = raw.quantize(CENTS)
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidAmount("Invalid balance amount")
        if not balance.is_finite() or balance < 0 or balance != raw:
            raise InvalidAmount("Invalid balance amount")

        new_balance = await user_repository.set_balance(db, user_id, balance)
        if new_balance is None:
            raise UserNotFound(f"User {user_id} not found")

        logger.info(f"Set balance of user {user_id} to ${new_balance}")
        return new_balance


# Singleton instance
balance_service = BalanceService()
