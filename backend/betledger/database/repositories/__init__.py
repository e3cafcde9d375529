"""Repositories for the ledger store."""

from betledger.database.repositories.bets import BetRepository, bet_repository
from betledger.database.repositories.events import EventRepository, event_repository
from betledger.database.repositories.users import UserRepository, user_repository

__all__ = [
    "BetRepository",
    "EventRepository",
    "UserRepository",
    "bet_repository",
    "event_repository",
    "user_repository",
]
