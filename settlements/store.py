"""ZoneStore: the registry's serialized form in a single key-value slot.

Blob layout (version 1)::

    {"version": 1, "zones": {"<id>": {"x": 0, "z": 0, "rx": 0, "rz": 0,
                                      "title": "", "subtitle": ""}}}

Key order of ``zones`` is the registry's insertion order.  Blobs written
before versioning (a bare id -> record mapping) are migrated on load.
"""

from __future__ import annotations

import json
from typing import Mapping

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from host.storage import KeyValueStore
from settlements.models import Zone

SCHEMA_VERSION = 1
DEFAULT_STORAGE_KEY = "city_database"


class ZoneRecord(BaseModel):
    """Persisted fields of one zone."""

    model_config = ConfigDict(extra="ignore")

    x: StrictInt
    z: StrictInt
    rx: StrictInt = Field(ge=0)
    rz: StrictInt = Field(ge=0)
    title: StrictStr
    subtitle: StrictStr = ""


class RegistryDocument(BaseModel):
    """Top-level persisted document."""

    version: StrictInt
    zones: dict[str, ZoneRecord]


class ZoneStore:
    """Loads and saves the whole registry as one string blob."""

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY):
        self.kv = kv
        self.key = key

    def load(self) -> dict[str, Zone]:
        """Read the registry.  Never raises.

        A missing blob is an empty registry.  An unreadable or malformed
        blob is discarded with a warning and also yields an empty registry.
        """
        try:
            raw = self.kv.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read zone registry '{self.key}': {e}")
            return {}

        if raw is None:
            return {}

        try:
            zones = self.loads(raw)
        except Exception as e:
            logger.warning(f"Discarding unreadable zone registry '{self.key}': {e}")
            return {}

        logger.info(f"Loaded {len(zones)} zones")
        return zones

    def save(self, zones: Mapping[str, Zone]) -> bool:
        """Write the full registry in one call.

        Returns False (and leaves the previous blob in place) on failure.
        """
        try:
            blob = self.dumps(zones)
            self.kv.set(self.key, blob)
        except Exception as e:
            logger.warning(f"Failed to save zone registry '{self.key}': {e}")
            return False
        return True

    @staticmethod
    def dumps(zones: Mapping[str, Zone]) -> str:
        document = {
            "version": SCHEMA_VERSION,
            "zones": {zone_id: zone.to_dict() for zone_id, zone in zones.items()},
        }
        return json.dumps(document, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def loads(raw: str) -> dict[str, Zone]:
        """Parse a blob.  Raises ValueError if it is not a valid registry."""
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        if isinstance(data.get("version"), int) and "zones" in data:
            if data["version"] > SCHEMA_VERSION:
                raise ValueError(
                    f"schema version {data['version']} is newer than supported {SCHEMA_VERSION}"
                )
            document = RegistryDocument.model_validate(data)
        else:
            # Unversioned blob: the mapping itself is the zone table
            document = RegistryDocument.model_validate({"version": 0, "zones": data})
            logger.info(f"Migrating unversioned zone registry ({len(data)} zones)")

        return {
            zone_id: Zone.from_dict(zone_id, record.model_dump())
            for zone_id, record in document.zones.items()
        }
