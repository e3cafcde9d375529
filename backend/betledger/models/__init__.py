"""Database models module."""

from betledger.models.bet import Bet
from betledger.models.enums import (
    OUTCOME_KEYS,
    BetStatus,
    EventStatus,
    Outcome,
    UserRole,
)
from betledger.models.event import Event
from betledger.models.user import User

__all__ = [
    "Bet",
    "Event",
    "User",
    "Outcome",
    "EventStatus",
    "BetStatus",
    "UserRole",
    "OUTCOME_KEYS",
]
