"""API routers for the settlement notifier."""

from server.routers.commands import router as commands_router
from server.routers.players import router as players_router
from server.routers.zones import router as zones_router

__all__ = ["commands_router", "players_router", "zones_router"]
