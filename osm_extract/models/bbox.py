"""Bounding box model."""
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned lat/lon box in WGS84 degrees.

    Boxes crossing the antimeridian are not supported: ``west`` must not be
    greater than ``east`` for containment checks to make sense.
    """
    north: float
    south: float
    east: float
    west: float

    def __post_init__(self):
        if self.north < self.south:
            raise ValueError(
                f"north ({self.north}) must be greater than or equal to south ({self.south})"
            )

    @classmethod
    def from_sw_ne(cls, south: float, west: float,
                   north: float, east: float) -> 'BoundingBox':
        """Create from the (south, west, north, east) order used by Overpass."""
        return cls(north=north, south=south, east=east, west=west)

    @classmethod
    def from_nominatim(cls, boundingbox: Sequence[Any]) -> 'BoundingBox':
        """Create from a Nominatim ``boundingbox`` [south, north, west, east] of strings."""
        south, north, west, east = (float(v) for v in boundingbox)
        return cls(north=north, south=south, east=east, west=west)

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> 'BoundingBox':
        """Create from dictionary."""
        return cls(d['north'], d['south'], d['east'], d['west'])

    def contains(self, lon: float, lat: float) -> bool:
        """Inclusive point-in-box test."""
        return (self.west <= lon <= self.east and
                self.south <= lat <= self.north)

    def clamp(self, lon: float, lat: float) -> List[float]:
        """Clamp a position onto the box, coordinate by coordinate."""
        return [
            max(self.west, min(self.east, lon)),
            max(self.south, min(self.north, lat)),
        ]

    def to_overpass(self) -> str:
        """Overpass QL bbox filter, ``(south,west,north,east)``."""
        return f"({self.south},{self.west},{self.north},{self.east})"

    def to_polygon(self) -> List[List[float]]:
        """Closed [lon, lat] ring, clockwise from the north-west corner."""
        return [
            [self.west, self.north],
            [self.east, self.north],
            [self.east, self.south],
            [self.west, self.south],
            [self.west, self.north],
        ]

    def to_dict(self) -> Dict[str, float]:
        """Convert to dictionary representation."""
        return {
            'north': self.north,
            'south': self.south,
            'east': self.east,
            'west': self.west,
        }
