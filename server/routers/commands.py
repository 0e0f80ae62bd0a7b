"""Command surface: script events carrying free-text zone commands."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from server.services import NotifierServices, get_services

router = APIRouter(prefix="/api/commands", tags=["commands"])


class ScriptEvent(BaseModel):
    """A command such as ``zone:set`` with its message payload."""
    player_id: str
    command: str
    message: str = ""


@router.post("")
async def run_command(event: ScriptEvent, services: NotifierServices = Depends(get_services)):
    """Run a zone command for a player.

    Usage errors, duplicate and unknown ids come back as ``ok: false``
    replies, the same text the player sees in chat.
    """
    reply = services.handler.handle_command(event.player_id, event.command, event.message)
    if reply is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown command namespace (expected '{services.settings.command_namespace}:')",
        )
    return reply.to_dict()
