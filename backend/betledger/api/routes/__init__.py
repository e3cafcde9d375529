"""API routes module."""

from betledger.api.routes.admin import router as admin_router
from betledger.api.routes.bets import router as bets_router
from betledger.api.routes.events import router as events_router
from betledger.api.routes.users import router as users_router

__all__ = [
    "admin_router",
    "bets_router",
    "events_router",
    "users_router",
]
