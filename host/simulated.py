"""In-memory host: a player roster and recorded HUD state.

Used by the standalone server, where player positions arrive over HTTP,
and by tests.  Every display call is recorded so callers can see what a
player would have on screen.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from host.base import HostAdapter, PlayerSnapshot, TitleTiming

# Maximum chat lines kept per player
MESSAGE_HISTORY = 50


@dataclass
class HudState:
    """What one player currently sees, plus a log of display calls."""

    title: str = ""
    subtitle: str = ""
    timing: TitleTiming | None = None
    messages: list[str] = field(default_factory=list)
    sounds: list[str] = field(default_factory=list)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "messages": list(self.messages),
            "sounds": list(self.sounds),
        }


class SimulatedHost(HostAdapter):
    """Host adapter backed by plain dictionaries."""

    def __init__(self) -> None:
        self._players: dict[str, PlayerSnapshot] = {}
        self._huds: dict[str, HudState] = {}

    # -- Roster -------------------------------------------------------------

    def join(self, player_id: str, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> PlayerSnapshot:
        """Add a player, or move one that is already online."""
        if player_id not in self._players:
            logger.info(f"Player {player_id} joined at [{x:.1f}, {y:.1f}, {z:.1f}]")
        return self.move(player_id, x, y, z)

    def move(self, player_id: str, x: float, y: float, z: float) -> PlayerSnapshot:
        snapshot = PlayerSnapshot(player_id=player_id, x=x, y=y, z=z)
        self._players[player_id] = snapshot
        self._huds.setdefault(player_id, HudState())
        return snapshot

    def leave(self, player_id: str) -> bool:
        if self._players.pop(player_id, None) is None:
            return False
        logger.info(f"Player {player_id} left")
        return True

    def hud(self, player_id: str) -> HudState:
        return self._huds.setdefault(player_id, HudState())

    # -- HostAdapter ----------------------------------------------------------

    def get_players(self) -> list[PlayerSnapshot]:
        return list(self._players.values())

    def get_player(self, player_id: str) -> PlayerSnapshot | None:
        return self._players.get(player_id)

    def set_title(self, player_id: str, text: str, timing: TitleTiming | None = None) -> None:
        hud = self.hud(player_id)
        hud.title = text
        hud.timing = timing
        hud.calls.append(("set_title", text))

    def update_subtitle(self, player_id: str, text: str) -> None:
        hud = self.hud(player_id)
        hud.subtitle = text
        hud.calls.append(("update_subtitle", text))

    def clear_title(self, player_id: str) -> None:
        hud = self.hud(player_id)
        hud.title = ""
        hud.timing = None
        hud.calls.append(("clear_title", ""))

    def send_message(self, player_id: str, text: str) -> None:
        hud = self.hud(player_id)
        hud.messages.append(text)
        del hud.messages[:-MESSAGE_HISTORY]

    def play_sound(self, player_id: str, sound_id: str) -> None:
        hud = self.hud(player_id)
        hud.sounds.append(sound_id)
        del hud.sounds[:-MESSAGE_HISTORY]
