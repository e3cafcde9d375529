"""Bet and settlement Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import inspect

from betledger.models import BetStatus, Outcome
from betledger.schemas.common import BaseSchema, TimestampSchema
from betledger.schemas.event import EventResponse


class BetCreate(BaseSchema):
    """
    Bet placement schema.

    Amount and option are checked by the bet service so that rejections
    carry ledger error codes rather than request validation errors.
    """

    event_id: UUID
    chosen_option: str
    amount: Any


class BetResponse(TimestampSchema):
    """Bet response schema."""

    id: UUID
    user_id: UUID
    event_id: UUID
    chosen_option: Outcome
    odds: Decimal
    amount: Decimal
    status: BetStatus
    winnings: Decimal
    settled_at: Optional[datetime]


class BetDetailResponse(BetResponse):
    """Bet with the names of its user and event, where loaded."""

    username: Optional[str] = None
    event_name: Optional[str] = None

    @classmethod
    def from_bet(cls, bet: Any) -> "BetDetailResponse":
        response = cls.model_validate(bet)
        unloaded = inspect(bet).unloaded
        if "user" not in unloaded and bet.user is not None:
            response.username = bet.user.username
        if "event" not in unloaded and bet.event is not None:
            response.event_name = bet.event.name
        return response


class BetStatsResponse(BaseSchema):
    total: int
    won: int
    lost: int
    pending: int
    total_winnings: Decimal
    win_rate: Decimal


class BetSettlementFailureResponse(BaseSchema):
    bet_id: UUID
    user_id: UUID
    error: str


class SettlementResponse(BaseSchema):
    """Outcome of settling one event."""

    event_id: UUID
    final_result: Outcome
    processed_count: int
    won_count: int
    lost_count: int
    total_paid: Decimal
    failures: list[BetSettlementFailureResponse]


class CloseEventResponse(BaseSchema):
    """Closed event together with its settlement pass."""

    event: EventResponse
    settlement: SettlementResponse
