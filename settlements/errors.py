"""Exceptions raised by the settlement registry."""


class SettlementError(Exception):
    """Base class for registry errors."""


class ZoneExistsError(SettlementError):
    """A zone with the requested id is already registered."""

    def __init__(self, zone_id: str):
        super().__init__(f"Zone '{zone_id}' already exists")
        self.zone_id = zone_id
