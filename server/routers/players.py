"""Player roster of the simulated host.

Only available when the notifier runs against ``SimulatedHost``; a real
game bridge reports players through its own adapter.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from host.simulated import SimulatedHost
from server.services import NotifierServices, get_services

router = APIRouter(prefix="/api/players", tags=["players"])


class PositionUpdate(BaseModel):
    """World position of a player."""
    x: float
    y: float = 0.0
    z: float


def _simulated_host(services: NotifierServices) -> SimulatedHost:
    if not isinstance(services.host, SimulatedHost):
        raise HTTPException(status_code=501, detail="Player roster is managed by the game host")
    return services.host


@router.get("")
async def list_players(services: NotifierServices = Depends(get_services)):
    """Active players and their tracked zone."""
    host = _simulated_host(services)
    result = []
    for player in host.get_players():
        session = services.tracker.state_of(player.player_id)
        result.append({
            "player_id": player.player_id,
            "position": {"x": player.x, "y": player.y, "z": player.z},
            "zone_id": session.zone_id if session else None,
        })
    return result


@router.put("/{player_id}")
async def move_player(
    player_id: str,
    position: PositionUpdate,
    services: NotifierServices = Depends(get_services),
):
    """Join or move a player."""
    host = _simulated_host(services)
    snapshot = host.join(player_id, position.x, position.y, position.z)
    return {"player_id": snapshot.player_id, "position": position.model_dump()}


@router.delete("/{player_id}")
async def remove_player(player_id: str, services: NotifierServices = Depends(get_services)):
    """Take a player offline."""
    host = _simulated_host(services)
    if not host.leave(player_id):
        raise HTTPException(status_code=404, detail="Player not found")
    return {"status": "left", "player_id": player_id}


@router.get("/{player_id}/hud")
async def player_hud(player_id: str, services: NotifierServices = Depends(get_services)):
    """What the player currently sees on screen."""
    host = _simulated_host(services)
    if host.get_player(player_id) is None:
        raise HTTPException(status_code=404, detail="Player not found")
    session = services.tracker.state_of(player_id)
    return {
        "player_id": player_id,
        "zone_id": session.zone_id if session else None,
        "notifications": services.preferences.is_enabled(player_id),
        **host.hud(player_id).to_dict(),
    }
