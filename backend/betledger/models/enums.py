"""Fixed vocabularies shared by the models, services and schemas."""

from enum import Enum


class Outcome(str, Enum):
    """Three-way result of an event."""

    HOME_WIN = "home_win"
    DRAW = "draw"
    AWAY_WIN = "away_win"


class EventStatus(str, Enum):
    """Event lifecycle status."""

    OPEN = "open"
    CLOSED = "closed"


class BetStatus(str, Enum):
    """Bet settlement status."""

    PENDING = "pending"
    WON = "won"
    LOST = "lost"


class UserRole(str, Enum):
    """User role."""

    ADMIN = "admin"
    PLAYER = "player"


OUTCOME_KEYS = tuple(o.value for o in Outcome)
