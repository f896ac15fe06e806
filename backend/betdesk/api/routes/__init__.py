"""API routes module."""

from betdesk.api.routes.admin import router as admin_router
from betdesk.api.routes.balance import router as balance_router
from betdesk.api.routes.bets import router as bets_router
from betdesk.api.routes.games import router as games_router

__all__ = [
    "admin_router",
    "balance_router",
    "bets_router",
    "games_router",
]
