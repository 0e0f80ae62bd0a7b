"""ZoneRegistry: CRUD over the in-memory zone table, persisted on every change."""

from typing import Iterator, Optional

from loguru import logger

from settlements.errors import ZoneExistsError
from settlements.models import Zone
from settlements.store import ZoneStore


class ZoneRegistry:
    """Insertion-ordered mapping of zone id to Zone.

    Every mutation is written through to the ZoneStore before the call
    returns.  If the write fails the in-memory change is kept and
    ``dirty`` stays set until a later save succeeds.
    """

    def __init__(self, store: ZoneStore, autoload: bool = True):
        """Initialize the registry.

        Args:
            store: ZoneStore used for load-on-start and save-on-mutation
            autoload: Load persisted zones immediately
        """
        self.store = store
        self._zones: dict[str, Zone] = {}
        self.dirty = False
        if autoload:
            self.reload()

    def reload(self):
        """Replace the in-memory table with the persisted one."""
        self._zones = self.store.load()
        self.dirty = False

    def _save(self):
        self.dirty = not self.store.save(self._zones)

    # ==================
    # Zone CRUD
    # ==================

    def create_zone(
        self,
        zone_id: str,
        x: int,
        z: int,
        rx: int,
        rz: int,
        title: str,
        subtitle: str = "",
    ) -> Zone:
        """Create a new zone at the end of iteration order.

        Raises:
            ZoneExistsError: if ``zone_id`` is already registered
            ValueError: if the id is empty or a radius is negative
        """
        if zone_id in self._zones:
            raise ZoneExistsError(zone_id)

        zone = Zone(zone_id=zone_id, x=x, z=z, rx=rx, rz=rz, title=title, subtitle=subtitle)
        self._zones[zone_id] = zone
        self._save()

        logger.info(f"Created zone '{zone_id}' at [{x}, {z}] radius {rx}x{rz}")
        return zone

    def get_zone(self, zone_id: str) -> Optional[Zone]:
        """Get a zone by ID."""
        return self._zones.get(zone_id)

    def list_zones(self) -> list[Zone]:
        """All zones in creation order."""
        return list(self._zones.values())

    def delete_zone(self, zone_id: str) -> bool:
        """Delete a zone.

        Returns:
            True if deleted, False if no such zone
        """
        if zone_id not in self._zones:
            return False

        del self._zones[zone_id]
        self._save()
        logger.info(f"Deleted zone '{zone_id}'")
        return True

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._zones

    def __iter__(self) -> Iterator[Zone]:
        return iter(list(self._zones.values()))
