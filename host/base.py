"""Host adapter interface.

The game host provides the player roster with positions, the on-screen
display (title/subtitle), sounds and chat messages.  An adapter must
implement every capability below; ``check_capabilities`` is run once at
startup so an incomplete adapter fails there instead of on some later
tick.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

REQUIRED_CAPABILITIES = (
    "get_players",
    "get_player",
    "set_title",
    "update_subtitle",
    "clear_title",
    "send_message",
    "play_sound",
)


class HostCompatibilityError(RuntimeError):
    """The host adapter is missing required capabilities."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Host adapter is missing capabilities: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class PlayerSnapshot:
    """A player's identity and position at the time of the query."""

    player_id: str
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class TitleTiming:
    """Title animation timing, in ticks."""

    fade_in: int = 10
    stay: int = 25
    fade_out: int = 10


class HostAdapter(ABC):
    """Capabilities the notifier needs from the game host."""

    @abstractmethod
    def get_players(self) -> list[PlayerSnapshot]:
        """Current roster of active players."""

    @abstractmethod
    def get_player(self, player_id: str) -> PlayerSnapshot | None:
        """One active player, or None if not online."""

    @abstractmethod
    def set_title(self, player_id: str, text: str, timing: TitleTiming | None = None) -> None:
        ...

    @abstractmethod
    def update_subtitle(self, player_id: str, text: str) -> None:
        ...

    @abstractmethod
    def clear_title(self, player_id: str) -> None:
        ...

    @abstractmethod
    def send_message(self, player_id: str, text: str) -> None:
        ...

    @abstractmethod
    def play_sound(self, player_id: str, sound_id: str) -> None:
        ...


def check_capabilities(host: Any) -> None:
    """Verify ``host`` provides every required capability.

    Adapters need not subclass HostAdapter, but they must expose all of
    its methods as callables.

    Raises:
        HostCompatibilityError: listing every missing capability
    """
    missing = [name for name in REQUIRED_CAPABILITIES if not callable(getattr(host, name, None))]
    if missing:
        raise HostCompatibilityError(missing)
