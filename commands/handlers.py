"""Request handlers: command and form input to registry CRUD.

Each request produces a Reply, which is also sent back to the requesting
player as a chat message.  Usage errors, duplicate ids and unknown ids are
ordinary replies, not faults.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

from loguru import logger

from commands.parser import (
    DEFAULT_NAMESPACE,
    Action,
    UsageError,
    ZoneCommand,
    parse_command,
    parse_form_add,
)
from host.base import HostAdapter
from settlements.errors import ZoneExistsError
from settlements.models import Zone
from settlements.registry import ZoneRegistry
from tracking.preferences import NotifierPreferences

DEFAULT_PREFIX = "[CityNotifier]"
DEFAULT_CONFIRMATION_SOUND = "random.levelup"

# Reply error kinds
USAGE = "usage"
EXISTS = "exists"
NOT_FOUND = "not_found"
OFFLINE = "offline"
UNAVAILABLE = "unavailable"

# Chat colour codes
SUCCESS = "§a"
ERROR = "§c"
INFO = "§e"


@dataclass
class Reply:
    """Outcome of one request."""

    ok: bool
    message: str
    error: Optional[str] = None
    zone: Optional[Zone] = None
    zones: list[Zone] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = {"ok": self.ok, "message": self.message, "error": self.error}
        if self.zone is not None:
            data["zone"] = {"zone_id": self.zone.zone_id, **self.zone.to_dict()}
        if self.zones:
            data["zones"] = [{"zone_id": z.zone_id, **z.to_dict()} for z in self.zones]
        return data


def format_zone_row(zone: Zone) -> str:
    min_x, min_z, max_x, max_z = zone.bounds
    return f"{zone.zone_id}: [{min_x}, {min_z}] to [{max_x}, {max_z}] - {zone.title}"


class ZoneRequestHandler:
    """Translates requests into ZoneRegistry calls and acknowledgements."""

    def __init__(
        self,
        registry: ZoneRegistry,
        host: HostAdapter,
        preferences: NotifierPreferences | None = None,
        namespace: str = DEFAULT_NAMESPACE,
        prefix: str = DEFAULT_PREFIX,
        confirmation_sound: str | None = DEFAULT_CONFIRMATION_SOUND,
    ):
        self.registry = registry
        self.host = host
        self.preferences = preferences
        self.namespace = namespace
        self.prefix = prefix
        self.confirmation_sound = confirmation_sound

    # ==================
    # Command surface
    # ==================

    def handle_command(self, player_id: str, command_id: str, message: str) -> Optional[Reply]:
        """Handle a script event from ``player_id``.

        Returns None when the event is not one of ours.
        """
        try:
            command = parse_command(command_id, message, self.namespace)
        except UsageError as e:
            logger.debug(f"Bad command from {player_id}: {command_id} {message!r}")
            return self._fail(player_id, USAGE, str(e))

        if command is None:
            return None

        if command.action == Action.SET:
            return self._create(player_id, command)
        if command.action == Action.DELETE:
            return self.delete(player_id, command.zone_id)
        if command.action == Action.TOGGLE:
            return self.toggle(player_id, command.argument)
        return self.list_zones(player_id, detailed=command.argument == "full")

    # ==================
    # Form surface
    # ==================

    def form_add(self, player_id: str, fields: Mapping[str, object]) -> Reply:
        """Handle the add-zone form (id, rx, rz, subtitle, title)."""
        try:
            command = parse_form_add(fields)
        except UsageError as e:
            logger.debug(f"Bad zone form from {player_id}: {e}")
            return self._fail(player_id, USAGE, str(e))
        return self._create(player_id, command)

    def form_remove(self, player_id: str, zone_id: str) -> Reply:
        """Handle the remove form (zone chosen from the list)."""
        return self.delete(player_id, zone_id)

    def zone_choices(self) -> list[str]:
        """Ids offered by the remove form's dropdown."""
        return [zone.zone_id for zone in self.registry.list_zones()]

    # ==================
    # Operations
    # ==================

    def create(
        self,
        player_id: str,
        zone_id: str,
        rx: int,
        rz: int,
        title: str,
        subtitle: str = "",
    ) -> Reply:
        """Create a zone centred on the requester's current block."""
        return self._create(player_id, ZoneCommand(Action.SET, zone_id, rx, rz, title, subtitle))

    def _create(self, player_id: str, command: ZoneCommand) -> Reply:
        if not command.zone_id:
            return self._fail(player_id, USAGE, "Zone id is required")
        if command.rx < 0 or command.rz < 0:
            return self._fail(player_id, USAGE, "Zone size must not be negative")

        player = self.host.get_player(player_id)
        if player is None:
            return self._fail(player_id, OFFLINE, f"Player '{player_id}' is not online")

        x = math.floor(player.x)
        z = math.floor(player.z)
        try:
            zone = self.registry.create_zone(
                command.zone_id, x, z, command.rx, command.rz, command.title, command.subtitle
            )
        except ZoneExistsError:
            return self._fail(
                player_id, EXISTS,
                f"Zone '{command.zone_id}' already exists. Delete it first to redefine it.",
            )

        width, depth = zone.size
        text = (
            f"Zone '{zone.zone_id}' set at [{zone.x}, {zone.z}] "
            f"with size {zone.rx}x{zone.rz} ({width}x{depth} blocks)."
        )
        reply = self._reply(player_id, True, self._note_unsaved(text), zone=zone)
        if self.confirmation_sound:
            self._safe_call(self.host.play_sound, player_id, self.confirmation_sound)
        return reply

    def delete(self, player_id: str | None, zone_id: str) -> Reply:
        zone_id = zone_id.strip()
        if not zone_id:
            return self._fail(player_id, USAGE, "Zone id is required")

        zone = self.registry.get_zone(zone_id)
        if zone is None:
            return self._fail(player_id, NOT_FOUND, f"Zone '{zone_id}' not found.")
        self.registry.delete_zone(zone_id)

        return self._reply(player_id, True, self._note_unsaved(f"Zone '{zone_id}' deleted."), zone=zone)

    def list_zones(self, player_id: str | None = None, detailed: bool = False) -> Reply:
        zones = self.registry.list_zones()
        if not zones:
            return self._reply(player_id, True, "No zones registered.", color=INFO)

        if detailed:
            text = "Zones:\n" + "\n".join(format_zone_row(z) for z in zones)
        else:
            text = "Zones: " + ", ".join(z.zone_id for z in zones)
        return self._reply(player_id, True, text, zones=zones)

    def toggle(self, player_id: str, argument: str = "") -> Reply:
        """Switch zone notifications on or off for the requester."""
        if self.preferences is None:
            return self._fail(player_id, UNAVAILABLE, "Notification settings are not available.")

        if argument in ("on", "off"):
            enabled = argument == "on"
        else:
            enabled = not self.preferences.is_enabled(player_id)
        saved = self.preferences.set_enabled(player_id, enabled)

        text = f"Zone notifications {'enabled' if enabled else 'disabled'}."
        if not saved:
            text += " (not saved)"
        return self._reply(player_id, True, text)

    # ==================
    # Helpers
    # ==================

    def _note_unsaved(self, text: str) -> str:
        if self.registry.dirty:
            return f"{text} Warning: changes could not be saved."
        return text

    def _fail(self, player_id: str | None, error: str, text: str) -> Reply:
        return self._reply(player_id, False, text, error=error)

    def _reply(
        self,
        player_id: str | None,
        ok: bool,
        text: str,
        color: str | None = None,
        **kwargs,
    ) -> Reply:
        reply = Reply(ok=ok, message=text, **kwargs)
        if player_id:
            color = color or (SUCCESS if ok else ERROR)
            self._safe_call(self.host.send_message, player_id, f"{color}{self.prefix} {text}")
        return reply

    def _safe_call(self, fn, *args) -> None:
        try:
            fn(*args)
        except Exception as e:
            logger.warning(f"Host call {getattr(fn, '__name__', fn)} failed: {e}")
