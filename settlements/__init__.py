"""Settlement zones: registry, persistence and spatial lookup."""

from settlements.errors import SettlementError, ZoneExistsError
from settlements.models import Zone, ZoneTransition, TransitionKind
from settlements.store import ZoneStore
from settlements.registry import ZoneRegistry
from settlements.locator import ZoneLocator

__all__ = [
    "SettlementError",
    "ZoneExistsError",
    "Zone",
    "ZoneTransition",
    "TransitionKind",
    "ZoneStore",
    "ZoneRegistry",
    "ZoneLocator",
]
