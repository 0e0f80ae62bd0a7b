"""SessionTracker: per-player zone membership and enter/exit notifications.

Each player is in one of three states:

    Unknown      never evaluated (no entry in the session map)
    InZone(id)   last seen inside zone ``id``
    Wilderness   last seen outside every zone

Notifications are driven purely by the previous tracked state, never by
position deltas, so a player standing still in a zone is notified once,
and a player first evaluated in the wilderness gets no exit message.

Display order matters: the subtitle is always sent before the title call,
because some displays only render a subtitle when a title update follows.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from host.base import HostAdapter, TitleTiming
from settlements.models import TransitionKind, Zone, ZoneTransition

DEFAULT_WILDERNESS_TEXT = "§7Wilderness"


@dataclass
class PlayerSession:
    """Tracked zone membership for one player.

    ``zone_id`` is None while the player is known to be in the wilderness.
    """

    player_id: str
    zone_id: str | None = None
    transitions: int = 0
    last_position: tuple[int, int] = field(default=(0, 0))

    @property
    def in_wilderness(self) -> bool:
        return self.zone_id is None


class SessionTracker:
    """Detects zone transitions and drives the host display."""

    def __init__(
        self,
        host: HostAdapter,
        wilderness_text: str = DEFAULT_WILDERNESS_TEXT,
        title_timing: TitleTiming | None = None,
    ) -> None:
        self._host = host
        self.wilderness_text = wilderness_text
        self.title_timing = title_timing
        self._sessions: dict[str, PlayerSession] = {}

    # -- Inspection ---------------------------------------------------------

    def state_of(self, player_id: str) -> PlayerSession | None:
        """Session for ``player_id``, or None if never evaluated."""
        return self._sessions.get(player_id)

    def get_sessions(self) -> dict[str, PlayerSession]:
        return dict(self._sessions)

    def forget(self, player_id: str) -> bool:
        return self._sessions.pop(player_id, None) is not None

    def prune(self, active_ids: set[str]) -> int:
        """Drop sessions of players no longer on the roster."""
        stale = [pid for pid in self._sessions if pid not in active_ids]
        for pid in stale:
            del self._sessions[pid]
        return len(stale)

    def reset(self) -> None:
        self._sessions.clear()

    # -- Transitions --------------------------------------------------------

    def update(
        self,
        player_id: str,
        zone: Zone | None,
        position: tuple[int, int],
        notify: bool = True,
    ) -> ZoneTransition | None:
        """Feed the current lookup result for one player.

        The new state is recorded before any display call, so if the host
        raises while rendering, the transition still counts and will not
        be re-sent on the next poll.

        Returns:
            The transition that happened, or None
        """
        session = self._sessions.get(player_id)

        if zone is not None:
            if session is not None and session.zone_id == zone.zone_id:
                session.last_position = position
                return None
            transition = ZoneTransition(player_id, TransitionKind.ENTER, zone.zone_id, position)
        else:
            if session is None or session.in_wilderness:
                # Unknown players are recorded as wilderness without a message
                if session is None:
                    self._sessions[player_id] = PlayerSession(player_id, None, 0, position)
                else:
                    session.last_position = position
                return None
            transition = ZoneTransition(player_id, TransitionKind.EXIT, session.zone_id, position)

        if session is None:
            session = PlayerSession(player_id)
            self._sessions[player_id] = session
        session.zone_id = zone.zone_id if zone is not None else None
        session.transitions += 1
        session.last_position = position

        if transition.kind == TransitionKind.ENTER:
            logger.debug(f"Player {player_id} entered {zone.zone_id} at {list(position)}")
        else:
            logger.debug(f"Player {player_id} left {transition.zone_id} at {list(position)}")

        if notify:
            self._emit(transition, zone)
        return transition

    def _emit(self, transition: ZoneTransition, zone: Zone | None) -> None:
        pid = transition.player_id
        if transition.kind == TransitionKind.ENTER:
            self._host.update_subtitle(pid, zone.subtitle)
            self._host.set_title(pid, zone.title, self.title_timing)
        else:
            self._host.update_subtitle(pid, self.wilderness_text)
            self._host.clear_title(pid)
