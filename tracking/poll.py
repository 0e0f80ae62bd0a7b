"""PollLoop: periodic zone evaluation for every active player.

The host calls ``on_tick`` at its fixed tick rate (20 ticks/s); every
``interval_ticks`` ticks the loop polls the roster.  The roster is fetched
fresh each poll, so players who leave simply stop being evaluated and
their sessions are pruned.

Players are evaluated independently: an exception while handling one
player (a display call failing, a bad position) is logged and the rest of
the roster is still processed.
"""

from __future__ import annotations

import asyncio
import math

from loguru import logger

from host.base import HostAdapter, PlayerSnapshot
from settlements.locator import ZoneLocator
from settlements.models import ZoneTransition
from tracking.preferences import NotifierPreferences
from tracking.session import SessionTracker


class PollLoop:
    """Feeds floored player positions through the locator and tracker."""

    DEFAULT_INTERVAL_TICKS = 50  # 2.5s at 20 ticks/s
    DEFAULT_TICK_RATE = 20.0

    def __init__(
        self,
        host: HostAdapter,
        locator: ZoneLocator,
        tracker: SessionTracker,
        preferences: NotifierPreferences | None = None,
        interval_ticks: int = DEFAULT_INTERVAL_TICKS,
    ) -> None:
        if interval_ticks < 1:
            raise ValueError(f"interval_ticks must be >= 1 (got {interval_ticks})")
        self._host = host
        self._locator = locator
        self._tracker = tracker
        self._preferences = preferences
        self.interval_ticks = interval_ticks
        self._ticks = 0
        self.polls = 0
        self.failures = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def on_tick(self) -> list[ZoneTransition]:
        """Advance one host tick; polls when the interval elapses."""
        self._ticks += 1
        if self._ticks < self.interval_ticks:
            return []
        self._ticks = 0
        return self.poll()

    def poll(self) -> list[ZoneTransition]:
        """Evaluate every active player once.

        Returns:
            Transitions that were emitted successfully this cycle
        """
        try:
            players = self._host.get_players()
        except Exception as e:
            logger.warning(f"Could not read player roster, skipping poll: {e}")
            return []

        transitions: list[ZoneTransition] = []
        for player in players:
            try:
                transition = self._evaluate(player)
            except Exception as e:
                self.failures += 1
                logger.warning(f"Zone update failed for player {player.player_id}: {e}")
                continue
            if transition is not None:
                transitions.append(transition)

        self._tracker.prune({p.player_id for p in players})
        self.polls += 1
        return transitions

    def _evaluate(self, player: PlayerSnapshot) -> ZoneTransition | None:
        px = math.floor(player.x)
        pz = math.floor(player.z)
        zone = self._locator.find(px, pz)

        notify = True
        if self._preferences is not None:
            notify = self._preferences.is_enabled(player.player_id)

        return self._tracker.update(player.player_id, zone, (px, pz), notify=notify)

    async def run(self, tick_rate: float = DEFAULT_TICK_RATE) -> None:
        """Drive ``on_tick`` at ``tick_rate`` until the task is cancelled."""
        period = 1.0 / tick_rate
        self._running = True
        logger.info(
            f"Zone poll loop started (every {self.interval_ticks} ticks at {tick_rate:g} ticks/s)"
        )
        try:
            while True:
                await asyncio.sleep(period)
                try:
                    self.on_tick()
                except Exception as e:
                    logger.warning(f"Zone poll loop error: {e}")
        finally:
            self._running = False
            logger.info("Zone poll loop stopped")
