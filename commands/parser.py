"""Parsing for zone commands and form submissions.

Command surface (sent as script events, namespace defaults to ``zone``)::

    zone:set <id> <rx> <rz> "<title>" "<subtitle>"
    zone:del <id>
    zone:list [full]
    zone:toggle [on|off]
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

DEFAULT_NAMESPACE = "zone"

ZONE_ID_PATTERN = re.compile(r"^\w+$")
SET_PATTERN = re.compile(r'^(\w+)\s+(\d+)\s+(\d+)\s+"([^"]*)"\s+"([^"]*)"$')
RADIUS_PATTERN = re.compile(r"^\d+$", re.ASCII)


class UsageError(ValueError):
    """Malformed command or form input."""


class Action(str, Enum):
    SET = "set"
    DELETE = "del"
    LIST = "list"
    TOGGLE = "toggle"


@dataclass(frozen=True)
class ZoneCommand:
    """A parsed command.  Unused fields keep their defaults."""

    action: Action
    zone_id: str = ""
    rx: int = 0
    rz: int = 0
    title: str = ""
    subtitle: str = ""
    argument: str = ""


def usage(action: Action, namespace: str = DEFAULT_NAMESPACE) -> str:
    prefix = f"/scriptevent {namespace}:{action.value}"
    if action == Action.SET:
        return f'Usage: {prefix} <id> <rx> <rz> "<title>" "<subtitle>"'
    if action == Action.DELETE:
        return f"Usage: {prefix} <id>"
    if action == Action.TOGGLE:
        return f"Usage: {prefix} [on|off]"
    return f"Usage: {prefix} [full]"


def parse_command(
    command_id: str,
    message: str,
    namespace: str = DEFAULT_NAMESPACE,
) -> Optional[ZoneCommand]:
    """Parse one script event.

    Returns:
        The parsed command, or None if ``command_id`` belongs to another
        namespace

    Raises:
        UsageError: if the command is ours but malformed
    """
    ns, sep, name = command_id.partition(":")
    if not sep or ns != namespace:
        return None

    try:
        action = Action(name)
    except ValueError:
        known = ", ".join(f"{namespace}:{a.value}" for a in Action)
        raise UsageError(f"Unknown command '{command_id}'. Available: {known}")

    message = message.strip()

    if action == Action.SET:
        match = SET_PATTERN.match(message)
        if not match:
            raise UsageError(usage(action, namespace))
        zone_id, rx, rz, title, subtitle = match.groups()
        return ZoneCommand(action, zone_id, int(rx), int(rz), title, subtitle)

    if action == Action.DELETE:
        if not ZONE_ID_PATTERN.match(message):
            raise UsageError(usage(action, namespace))
        return ZoneCommand(action, zone_id=message)

    if action == Action.TOGGLE:
        argument = message.lower()
        if argument not in ("", "on", "off"):
            raise UsageError(usage(action, namespace))
        return ZoneCommand(action, argument=argument)

    argument = message.lower()
    if argument not in ("", "full"):
        raise UsageError(usage(action, namespace))
    return ZoneCommand(action, argument=argument)


def parse_radius(value: object, name: str) -> int:
    """Parse a half-extent from form input as a non-negative integer."""
    text = str(value).strip() if value is not None else ""
    if text.startswith("-") and RADIUS_PATTERN.match(text[1:]):
        raise UsageError(f"{name} must not be negative (got {text})")
    if not RADIUS_PATTERN.match(text):
        raise UsageError(f"{name} must be a whole number (got '{text}')")
    return int(text)


def parse_form_add(fields: Mapping[str, object]) -> ZoneCommand:
    """Validate an add-zone form submission.

    Expected fields: ``id``, ``rx``, ``rz``, ``subtitle``, ``title``.
    """
    zone_id = str(fields.get("id") or "").strip()
    if not zone_id:
        raise UsageError("Zone id is required")
    if not ZONE_ID_PATTERN.match(zone_id):
        raise UsageError(f"Zone id may only contain letters, digits and '_' (got '{zone_id}')")

    rx = parse_radius(fields.get("rx"), "rx")
    rz = parse_radius(fields.get("rz"), "rz")

    title = str(fields.get("title") or "")
    subtitle = str(fields.get("subtitle") or "")
    if '"' in title or '"' in subtitle:
        raise UsageError("Title and subtitle may not contain double quotes")

    return ZoneCommand(Action.SET, zone_id, rx, rz, title, subtitle)
