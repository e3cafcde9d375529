"""Business logic services."""

from betledger.services.auth_service import AuthService, auth_service
from betledger.services.balance_service import BalanceService, balance_service, to_money
from betledger.services.bet_service import BetService, bet_service
from betledger.services.event_service import (
    EventService,
    event_service,
    validate_odds,
    validate_outcome,
)
from betledger.services.settlement_service import (
    BetSettlementFailure,
    SettlementResult,
    SettlementService,
    settlement_service,
)
from betledger.services.user_service import UserService, user_service

__all__ = [
    "AuthService",
    "BalanceService",
    "BetService",
    "BetSettlementFailure",
    "EventService",
    "SettlementResult",
    "SettlementService",
    "UserService",
    "auth_service",
    "balance_service",
    "bet_service",
    "event_service",
    "settlement_service",
    "to_money",
    "user_service",
    "validate_odds",
    "validate_outcome",
]
