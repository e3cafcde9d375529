"""Event management service."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Mapping, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from betledger.database.repositories import bet_repository, event_repository
from betledger.exceptions import (
    AlreadyClosed,
    EventClosed,
    EventHasBets,
    EventNotFound,
    InvalidOdds,
    InvalidOption,
)
from betledger.models import OUTCOME_KEYS, Event

logger = logging.getLogger(__name__)

ODDS_PRECISION = Decimal("0.001")
MAX_ODDS = Decimal("10000000")


def validate_outcome(option) -> str:
    """Normalize an outcome key, raising InvalidOption if it is not one."""
    value = getattr(option, "value", option)
    if value not in OUTCOME_KEYS:
        raise InvalidOption(f"Invalid option {value!r} (home_win, draw, away_win)")
    return value


def validate_odds(odds: Mapping) -> dict[str, Decimal]:
    """All three outcome keys present, each a finite number greater than 1."""
    if not isinstance(odds, Mapping):
        raise InvalidOdds()

    parsed = {}
    for key in OUTCOME_KEYS:
        raw = odds.get(key)
        if raw is None or isinstance(raw, bool):
            raise InvalidOdds(f"Missing odds for {key}")
        try:
            value = Decimal(str(raw)).quantize(ODDS_PRECISION)
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidOdds(f"Odds for {key} must be a number")
        if not value.is_finite() or value <= 1 or value >= MAX_ODDS:
            raise InvalidOdds(f"Odds for {key} must be greater than 1 and below {MAX_ODDS}")
        parsed[key] = value
    return parsed


class EventService:
    """
    Manages the lifecycle of betting events.
    An event is created open and is closed exactly once with a final result.
    """

    async def create_event(
        self,
        db: AsyncSession,
        name: str,
        odds: Mapping,
    ) -> Event:
        """Create an open event with fixed odds."""
        if not name or not name.strip():
            raise InvalidOdds("Event name and all odds are required")
        parsed = validate_odds(odds)

        event = Event(
            name=name.strip(),
            odds_home_win=parsed["home_win"],
            odds_draw=parsed["draw"],
            odds_away_win=parsed["away_win"],
            status="open",
        )
        await event_repository.insert(db, event)
        await db.commit()

        logger.info(f"Created event: {event.name} {parsed}")
        return event

    async def get_event(self, db: AsyncSession, event_id: UUID) -> Optional[Event]:
        """Fetch single event by ID."""
        return await event_repository.find_by_id(db, event_id)

    async def require_event(self, db: AsyncSession, event_id: UUID) -> Event:
        event = await event_repository.find_by_id(db, event_id)
        if not event:
            raise EventNotFound(f"Event {event_id} not found")
        return event

    async def is_open(self, db: AsyncSession, event_id: UUID) -> bool:
        """True if the event exists and accepts bets. False on lookup failure."""
        try:
            event = await event_repository.find_by_id(db, event_id)
            return event is not None and event.is_open
        except SQLAlchemyError as e:
            logger.warning(f"Event status check failed for {event_id}: {e}")
            return False

    async def lock_open_event(self, db: AsyncSession, event_id: UUID) -> Event:
        """
        Re-read the event under a row lock inside the caller's transaction.
        Raises EventClosed unless it is still open.
        """
        event = await event_repository.find_by_id(db, event_id, for_update=True)
        if event is None or not event.is_open:
            raise EventClosed(f"Event {event_id} is closed")
        return event

    async def close(
        self,
        db: AsyncSession,
        event_id: UUID,
        final_result: str,
    ) -> Event:
        """Close an open event with its final result."""
        final_result = validate_outcome(final_result)
        event = await self.require_event(db, event_id)
        if not event.is_open:
            raise AlreadyClosed(
                f"Event {event_id} is already closed",
                final_result=event.final_result,
            )

        # Lost a race with a concurrent close
        if not await event_repository.update_status(db, event_id, final_result):
            await db.rollback()
            raise AlreadyClosed(f"Event {event_id} is already closed")

        await db.commit()
        await db.refresh(event)
        logger.info(f"Closed event: {event.name} with result {final_result}")
        return event

    async def list_open_events(self, db: AsyncSession) -> list[Event]:
        """Fetch all events open for betting."""
        return await event_repository.find_by_status(db, "open")

    async def list_events(
        self,
        db: AsyncSession,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Event]:
        """Fetch all events, newest first."""
        return await event_repository.find_many(db, limit=limit, offset=offset)

    async def update_event(
        self,
        db: AsyncSession,
        event_id: UUID,
        name: str,
    ) -> Event:
        """Rename an open event. Odds and results are not editable."""
        event = await self.require_event(db, event_id)
        if not event.is_open:
            raise EventClosed(f"Event {event_id} is closed")
        if not name or not name.strip():
            raise InvalidOdds("Event name is required")

        event.name = name.strip()
        await db.commit()
        await db.refresh(event)
        logger.info(f"Renamed event {event_id} to {event.name}")
        return event

    async def delete_event(self, db: AsyncSession, event_id: UUID) -> None:
        """Delete an event that has never taken a bet."""
        event = await self.require_event(db, event_id)
        if await bet_repository.count_by_event(db, event_id):
            raise EventHasBets(f"Event {event_id} has bets and cannot be deleted")

        await event_repository.delete(db, event)
        await db.commit()
        logger.info(f"Deleted event: {event.name}")


# Singleton instance
event_service = EventService()
