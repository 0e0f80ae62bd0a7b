"""Per-player opt-out for zone notifications."""

from __future__ import annotations

from loguru import logger

from host.storage import KeyValueStore

DEFAULT_KEY_PREFIX = "bp_cityNotifier"


class NotifierPreferences:
    """Whether each player wants zone titles.  Defaults to enabled.

    Each player's flag is its own key in the key-value store, stored as
    ``"true"`` or ``"false"``.
    """

    def __init__(self, kv: KeyValueStore, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self._kv = kv
        self._prefix = key_prefix
        self._cache: dict[str, bool] = {}

    def _key(self, player_id: str) -> str:
        return f"{self._prefix}:{player_id}"

    def is_enabled(self, player_id: str) -> bool:
        if player_id in self._cache:
            return self._cache[player_id]

        try:
            raw = self._kv.get(self._key(player_id))
        except Exception as e:
            logger.warning(f"Failed to read notifier preference for {player_id}: {e}")
            return True

        # Anything other than an explicit "false" counts as enabled
        enabled = raw != "false"
        self._cache[player_id] = enabled
        return enabled

    def set_enabled(self, player_id: str, enabled: bool) -> bool:
        """Record the flag.  Returns False if it could not be persisted."""
        self._cache[player_id] = enabled
        try:
            self._kv.set(self._key(player_id), "true" if enabled else "false")
        except Exception as e:
            logger.warning(f"Failed to save notifier preference for {player_id}: {e}")
            return False
        return True
