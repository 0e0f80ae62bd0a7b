"""Host adapter interface, storage substrate and the in-memory host."""

from host.base import (
    HostAdapter,
    HostCompatibilityError,
    PlayerSnapshot,
    TitleTiming,
    check_capabilities,
)
from host.storage import KeyValueStore, MemoryKeyValueStore
from host.simulated import HudState, SimulatedHost

__all__ = [
    "HostAdapter",
    "HostCompatibilityError",
    "PlayerSnapshot",
    "TitleTiming",
    "check_capabilities",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "HudState",
    "SimulatedHost",
]
