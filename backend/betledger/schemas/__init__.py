"""Pydantic schemas for API request/response validation."""

from betledger.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from betledger.schemas.bet import (
    BetCreate,
    BetDetailResponse,
    BetResponse,
    BetSettlementFailureResponse,
    BetStatsResponse,
    CloseEventResponse,
    SettlementResponse,
)
from betledger.schemas.common import (
    BaseSchema,
    ErrorResponse,
    MessageResponse,
    TimestampSchema,
)
from betledger.schemas.event import (
    EventClose,
    EventCreate,
    EventResponse,
    EventStatusResponse,
    EventUpdate,
)
from betledger.schemas.user import (
    BalanceCheckResponse,
    BalanceResponse,
    BalanceUpdate,
    UserCreate,
    UserResponse,
    UserUpdate,
)

__all__ = [
    # Common
    "BaseSchema",
    "ErrorResponse",
    "MessageResponse",
    "TimestampSchema",
    # Auth
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    # User
    "BalanceCheckResponse",
    "BalanceResponse",
    "BalanceUpdate",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    # Event
    "EventClose",
    "EventCreate",
    "EventResponse",
    "EventStatusResponse",
    "EventUpdate",
    # Bet
    "BetCreate",
    "BetDetailResponse",
    "BetResponse",
    "BetSettlementFailureResponse",
    "BetStatsResponse",
    "CloseEventResponse",
    "SettlementResponse",
]
