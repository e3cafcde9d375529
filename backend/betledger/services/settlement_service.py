"""Settlement processing service."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import NamedTuple, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories import bet_repository, event_repository
from betledger.exceptions import EventNotFound, EventNotResolvable, LedgerError
from betledger.models import Event
from betledger.services.balance_service import balance_service
from betledger.services.bet_service import bet_service
from betledger.services.event_service import event_service

logger = logging.getLogger(__name__)


class _PendingBet(NamedTuple):
    """Detached copy of a pending bet row, read once per settlement pass."""

    id: UUID
    user_id: UUID
    chosen_option: str
    amount: Decimal
    odds: Decimal


@dataclass
class BetSettlementFailure:
    bet_id: UUID
    user_id: UUID
    error: str


@dataclass
class SettlementResult:
    """Outcome of one settlement pass over an event."""

    event_id: UUID
    final_result: str
    processed_count: int = 0
    won_count: int = 0
    lost_count: int = 0
    total_paid: Decimal = Decimal("0.00")
    failures: list[BetSettlementFailure] = field(default_factory=list)


class SettlementService:
    """
    Resolves the pending bets of a closed event against its final result.

    Each bet is settled in its own transaction: the conditional status write
    and the winner's credit commit together or not at all. A failing bet is
    rolled back, stays pending, and is reported without stopping the pass,
    so settling the event again picks it up.
    """

    async def settle_event(self, db: AsyncSession, event_id: UUID) -> SettlementResult:
        """
        Process settlement for a closed event.

        Process:
        1. Validate the event exists and has a final result
        2. Read all pending bets once
        3. Settle each bet independently (won: credit amount * odds, lost: no-op)
        4. Report the count of bets actually transitioned
        """
        event = await event_repository.find_by_id(db, event_id)
        if not event:
            raise EventNotFound(f"Event {event_id} not found")
        if not event.final_result:
            raise EventNotResolvable(f"Event {event_id} has no final result")

        final_result = event.final_result
        pending = [
            _PendingBet(b.id, b.user_id, b.chosen_option, b.amount, b.odds)
            for b in await bet_repository.find_by_event(db, event_id, status="pending")
        ]
        # End the read transaction before the per-bet units of work
        await db.commit()

        result = SettlementResult(event_id=event_id, final_result=final_result)

        for bet in pending:
            try:
                winnings = await self._settle_bet(db, bet, final_result)
                await db.commit()
            except (LedgerError, SQLAlchemyError) as e:
                await db.rollback()
                logger.exception(
                    f"Failed to settle bet {bet.id} for user {bet.user_id}: {e}"
                )
                result.failures.append(
                    BetSettlementFailure(bet_id=bet.id, user_id=bet.user_id, error=str(e))
                )
                continue

            if winnings is None:
                # Settled by a concurrent pass
                continue

            result.processed_count += 1
            if winnings > 0:
                result.won_count += 1
                result.total_paid += winnings
            else:
                result.lost_count += 1

        logger.info(
            f"Settled event {event_id}: {final_result} "
            f"({result.processed_count} bets, {result.won_count} won, "
            f"${result.total_paid} paid, {len(result.failures)} failed)"
        )
        return result

    async def _settle_bet(
        self,
        db: AsyncSession,
        bet: _PendingBet,
        final_result: str,
    ) -> Optional[Decimal]:
        """
        Resolve one bet. Returns its winnings, or None if it was no longer
        pending.
        """
        winnings = bet_service.calculate_winnings(bet, final_result)
        status = "won" if winnings > 0 else "lost"

        if not await bet_repository.update_status(db, bet.id, status, winnings):
            return None

        if status == "won":
            await balance_service.credit(db, bet.user_id, winnings)

        logger.debug(f"Settled bet {bet.id}: {bet.chosen_option} vs {final_result} -> {status}")
        return winnings

    async def close_and_settle(
        self,
        db: AsyncSession,
        event_id: UUID,
        final_result: str,
    ) -> tuple[Event, SettlementResult]:
        """Close an open event with its result, then settle its bets."""
        event = await event_service.close(db, event_id, final_result)
        result = await self.settle_event(db, event_id)
        # A rolled-back bet expires every instance in the session
        await db.refresh(event)
        return event, result

    async def settle_closed_events(self, db: AsyncSession) -> list[SettlementResult]:
        """Re-run settlement for closed events that still have pending bets."""
        events = await event_repository.find_closed_with_pending_bets(db)
        results = []
        for event_id in [e.id for e in events]:
            results.append(await self.settle_event(db, event_id))
        return results


# Singleton instance
settlement_service = SettlementService()
