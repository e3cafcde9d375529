"""Bet placement and tracking service."""

import logging
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories import bet_repository, user_repository
from betledger.exceptions import (
    BetAlreadySettled,
    BetNotFound,
    EventClosed,
    InsufficientBalance,
    LedgerError,
    UserNotFound,
)
from betledger.models import Bet
from betledger.services.balance_service import CENTS, balance_service, to_money
from betledger.services.event_service import event_service, validate_outcome

logger = logging.getLogger(__name__)


class BetService:
    """
    Handles bet placement, history and bet statistics.
    """

    async def place_bet(
        self,
        db: AsyncSession,
        user_id: UUID,
        event_id: UUID,
        chosen_option: str,
        amount: Decimal,
    ) -> Bet:
        """
        Place a bet for a user.

        Process:
        1. Validate amount and chosen option
        2. Check balance and that the event is open
        3. Resolve the user
        4. In one transaction: lock the event row and re-check it is open,
           debit the stake, snapshot the odds, insert the pending bet

        Any rejection happens before the debit or rolls it back.
        """
        amount = to_money(amount)
        chosen_option = validate_outcome(chosen_option)

        if not await balance_service.check_sufficient_balance(db, user_id, amount):
            raise InsufficientBalance(
                f"Insufficient balance for bet of ${amount}",
                user_id=str(user_id),
            )

        if not await event_service.is_open(db, event_id):
            raise EventClosed(f"Event {event_id} is closed")

        user = await user_repository.find_by_id(db, user_id)
        if not user:
            raise UserNotFound(f"User {user_id} not found")

        try:
            event = await event_service.lock_open_event(db, event_id)
            new_balance = await balance_service.debit(db, user_id, amount)

            bet = Bet(
                user_id=user_id,
                event_id=event_id,
                chosen_option=chosen_option,
                odds=event.odds_for(chosen_option),
                amount=amount,
                status="pending",
                winnings=Decimal("0.00"),
            )
            await bet_repository.insert(db, bet)
            await db.commit()
        except (LedgerError, SQLAlchemyError):
            await db.rollback()
            raise

        logger.info(
            f"Placed bet: {user.username} {chosen_option} ${amount} @ {bet.odds} "
            f"on event {event_id} (balance ${new_balance})"
        )
        return bet

    def calculate_winnings(self, bet: Bet, final_result: str) -> Decimal:
        """
        Payout for a bet given the event result.

        If chosen option matches the result:
            winnings = amount * odds snapshot
        Otherwise:
            winnings = 0 (the stake was already debited)
        """
        if bet.chosen_option != final_result:
            return Decimal("0.00")
        return (Decimal(bet.amount) * Decimal(bet.odds)).quantize(CENTS)

    async def get_bet(self, db: AsyncSession, bet_id: UUID) -> Optional[Bet]:
        """Get a bet by ID."""
        return await bet_repository.find_by_id(db, bet_id)

    async def get_user_bets(self, db: AsyncSession, user_id: UUID) -> list[Bet]:
        """Betting history for a user, newest first."""
        return await bet_repository.find_by_user(db, user_id, with_event=True)

    async def get_user_bet_stats(self, db: AsyncSession, user_id: UUID) -> dict:
        """
        Aggregate a user's bets.
        Returns: {total, won, lost, pending, total_winnings, win_rate}
        """
        bets = await bet_repository.find_by_user(db, user_id)

        won = sum(1 for b in bets if b.status == "won")
        lost = sum(1 for b in bets if b.status == "lost")
        settled = won + lost
        win_rate = (
            (Decimal(won) / Decimal(settled) * 100).quantize(CENTS)
            if settled
            else Decimal("0.00")
        )

        return {
            "total": len(bets),
            "won": won,
            "lost": lost,
            "pending": sum(1 for b in bets if b.status == "pending"),
            "total_winnings": sum(
                (b.winnings for b in bets), Decimal("0.00")
            ).quantize(CENTS),
            "win_rate": win_rate,
        }

    async def get_event_bets(self, db: AsyncSession, event_id: UUID) -> list[Bet]:
        """Get all bets on an event across all users."""
        await event_service.require_event(db, event_id)
        return await bet_repository.find_by_event(db, event_id, with_user=True)

    async def get_all_bets(self, db: AsyncSession) -> list[Bet]:
        """Get every bet, newest first."""
        return await bet_repository.find_all(db)

    async def delete_bet(self, db: AsyncSession, bet_id: UUID) -> None:
        """Delete a pending bet and refund its stake."""
        bet = await bet_repository.find_by_id(db, bet_id)
        if not bet:
            raise BetNotFound(f"Bet {bet_id} not found")
        if bet.is_settled:
            raise BetAlreadySettled(f"Bet {bet_id} already settled")

        user_id, amount = bet.user_id, bet.amount
        try:
            if not await bet_repository.delete_pending(db, bet_id):
                raise BetAlreadySettled(f"Bet {bet_id} already settled")
            await balance_service.credit(db, user_id, amount)
            await db.commit()
        except (LedgerError, SQLAlchemyError):
            await db.rollback()
            raise

        logger.info(f"Deleted bet {bet_id}, refunded ${amount} to user {user_id}")


# Singleton instance
bet_service = BetService()
