"""Command and form request handling for zone authoring."""

from commands.parser import Action, UsageError, ZoneCommand, parse_command, parse_form_add
from commands.handlers import Reply, ZoneRequestHandler

__all__ = [
    "Action",
    "UsageError",
    "ZoneCommand",
    "parse_command",
    "parse_form_add",
    "Reply",
    "ZoneRequestHandler",
]
