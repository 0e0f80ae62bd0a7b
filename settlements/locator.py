"""Point-in-zone lookup over the registry."""

from typing import Optional

from settlements.models import Zone
from settlements.registry import ZoneRegistry


class ZoneLocator:
    """Finds the zone containing a block coordinate.

    Zones are scanned in creation order and the first match wins, so when
    rectangles overlap the oldest zone takes the point.
    """

    def __init__(self, registry: ZoneRegistry):
        self.registry = registry

    def find(self, x: int, z: int) -> Optional[Zone]:
        for zone in self.registry:
            if zone.contains_point(x, z):
                return zone
        return None

    def locate(self, x: int, z: int) -> Optional[str]:
        """Zone id at (x, z), or None for wilderness."""
        zone = self.find(x, z)
        return zone.zone_id if zone is not None else None
