"""Zone form surface: add, remove and list zones."""

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from commands import handlers
from commands.handlers import Reply
from server.services import NotifierServices, get_services
from settlements.models import Zone

router = APIRouter(prefix="/api/zones", tags=["zones"])

ERROR_STATUS = {
    handlers.USAGE: 400,
    handlers.NOT_FOUND: 404,
    handlers.EXISTS: 409,
    handlers.OFFLINE: 409,
    handlers.UNAVAILABLE: 503,
}


# ==================
# Request/Response Models
# ==================

class AddZoneForm(BaseModel):
    """Add-zone form.  Numbers may arrive as text, as a form submits them."""
    player_id: str
    id: str
    rx: Union[int, str]
    rz: Union[int, str]
    subtitle: str = ""
    title: str = ""


class ZoneResponse(BaseModel):
    """Zone response model."""
    zone_id: str
    x: int
    z: int
    rx: int
    rz: int
    title: str
    subtitle: str
    bounds: list[int]


class ReplyResponse(BaseModel):
    """Acknowledgement sent to the requester."""
    ok: bool
    message: str
    zone: Optional[ZoneResponse] = None


# ==================
# Zone CRUD Endpoints
# ==================

@router.get("/", response_model=list[ZoneResponse])
async def list_zones(services: NotifierServices = Depends(get_services)):
    """List all zones in creation order."""
    return [_zone_to_response(z) for z in services.registry.list_zones()]


@router.get("/form/choices", response_model=list[str])
async def zone_choices(services: NotifierServices = Depends(get_services)):
    """Zone ids for the remove form's dropdown."""
    return services.handler.zone_choices()


@router.get("/{zone_id}", response_model=ZoneResponse)
async def get_zone(zone_id: str, services: NotifierServices = Depends(get_services)):
    """Get a specific zone."""
    zone = services.registry.get_zone(zone_id)
    if not zone:
        raise HTTPException(status_code=404, detail="Zone not found")
    return _zone_to_response(zone)


@router.post("/form", response_model=ReplyResponse)
async def add_zone(form: AddZoneForm, services: NotifierServices = Depends(get_services)):
    """Create a zone centred on the submitting player."""
    reply = services.handler.form_add(form.player_id, form.model_dump())
    return _reply_to_response(reply)


@router.delete("/{zone_id}", response_model=ReplyResponse)
async def remove_zone(
    zone_id: str,
    player_id: Optional[str] = Query(None, description="Player submitting the remove form"),
    services: NotifierServices = Depends(get_services),
):
    """Delete a zone."""
    reply = services.handler.form_remove(player_id, zone_id)
    return _reply_to_response(reply)


# ==================
# Helpers
# ==================

def _zone_to_response(zone: Zone) -> ZoneResponse:
    return ZoneResponse(
        zone_id=zone.zone_id,
        x=zone.x,
        z=zone.z,
        rx=zone.rx,
        rz=zone.rz,
        title=zone.title,
        subtitle=zone.subtitle,
        bounds=list(zone.bounds),
    )


def _reply_to_response(reply: Reply) -> ReplyResponse:
    if not reply.ok:
        raise HTTPException(status_code=ERROR_STATUS.get(reply.error, 400), detail=reply.message)
    return ReplyResponse(
        ok=reply.ok,
        message=reply.message,
        zone=_zone_to_response(reply.zone) if reply.zone is not None else None,
    )
