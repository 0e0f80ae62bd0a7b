"""Zone and ZoneTransition models for settlement notifications."""

from dataclasses import dataclass
from enum import Enum


class TransitionKind(str, Enum):
    """Kinds of zone boundary crossings."""
    ENTER = "enter"
    EXIT = "exit"


@dataclass(frozen=True)
class Zone:
    """A named axis-aligned rectangle in world coordinates.

    The zone covers the closed rectangle ``[x-rx, x+rx] x [z-rz, z+rz]``.
    """

    zone_id: str
    x: int
    z: int
    rx: int
    rz: int
    title: str
    subtitle: str = ""

    def __post_init__(self):
        if not self.zone_id:
            raise ValueError("Zone id must not be empty")
        if self.rx < 0 or self.rz < 0:
            raise ValueError(f"Zone radii must be non-negative (got rx={self.rx}, rz={self.rz})")

    @property
    def bounds(self) -> tuple[int, int, int, int]:
        """(min_x, min_z, max_x, max_z), inclusive."""
        return (self.x - self.rx, self.z - self.rz, self.x + self.rx, self.z + self.rz)

    @property
    def size(self) -> tuple[int, int]:
        """Width and depth in blocks."""
        return (2 * self.rx + 1, 2 * self.rz + 1)

    def contains_point(self, x: int, z: int) -> bool:
        """Check if a block coordinate is inside this zone."""
        min_x, min_z, max_x, max_z = self.bounds
        return min_x <= x <= max_x and min_z <= z <= max_z

    def to_dict(self) -> dict:
        # The id is the mapping key in the persisted blob, not a field.
        return {
            "x": self.x,
            "z": self.z,
            "rx": self.rx,
            "rz": self.rz,
            "title": self.title,
            "subtitle": self.subtitle,
        }

    @classmethod
    def from_dict(cls, zone_id: str, data: dict) -> "Zone":
        return cls(
            zone_id=zone_id,
            x=data["x"],
            z=data["z"],
            rx=data["rx"],
            rz=data["rz"],
            title=data["title"],
            subtitle=data.get("subtitle", ""),
        )


@dataclass(frozen=True)
class ZoneTransition:
    """A boundary crossing emitted for one player."""

    player_id: str
    kind: TransitionKind
    zone_id: str  # zone entered, or zone left on exit
    position: tuple[int, int]

    def to_dict(self) -> dict:
        return {
            "player_id": self.player_id,
            "kind": self.kind.value,
            "zone_id": self.zone_id,
            "position": {"x": self.position[0], "z": self.position[1]},
        }
