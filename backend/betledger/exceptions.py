"""Typed rejections raised by the ledger services.

Every expected failure in the core is a ``LedgerError`` subclass carrying a
stable ``code``. The API layer maps these to HTTP responses; services never
deal with transport concerns.
"""


class LedgerError(Exception):
    """Base exception for ledger rejections."""

    code = "ledger_error"

    def __init__(self, message: str | None = None, **details):
        super().__init__(message or self.__doc__)
        self.message = message or self.__doc__
        self.details = details


class InvalidAmount(LedgerError):
    """Amount must be a positive number."""

    code = "invalid_amount"


class InvalidOption(LedgerError):
    """Option must be one of home_win, draw, away_win."""

    code = "invalid_option"


class InvalidOdds(LedgerError):
    """Odds must supply home_win, draw and away_win, each greater than 1."""

    code = "invalid_odds"


class InsufficientBalance(LedgerError):
    """Insufficient balance."""

    code = "insufficient_balance"


class EventClosed(LedgerError):
    """Event is closed."""

    code = "event_closed"


class UserNotFound(LedgerError):
    """User not found."""

    code = "user_not_found"


class EventNotFound(LedgerError):
    """Event not found."""

    code = "event_not_found"


class BetNotFound(LedgerError):
    """Bet not found."""

    code = "bet_not_found"


class EventNotResolvable(LedgerError):
    """Event not found or no final result."""

    code = "event_not_resolvable"


class AlreadyClosed(LedgerError):
    """Event is already closed."""

    code = "already_closed"


class BetAlreadySettled(LedgerError):
    """Bet is already settled."""

    code = "bet_already_settled"


class EventHasBets(LedgerError):
    """Event has bets and cannot be deleted."""

    code = "event_has_bets"


class UserHasPendingBets(LedgerError):
    """User has pending bets and cannot be deleted."""

    code = "user_has_pending_bets"


class UsernameTaken(LedgerError):
    """Username already exists."""

    code = "username_taken"


class InvalidCredentials(LedgerError):
    """Invalid credentials."""

    code = "invalid_credentials"


class InvalidRole(LedgerError):
    """Role must be admin or player."""

    code = "invalid_role"
