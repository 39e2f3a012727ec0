"""Bounding-box clipping of single features.

This is a cheap vertex-filtering approximation, not exact polygon clipping:
lines keep their inside vertices plus a clamped entry point, polygon rings keep
only their inside vertices. Results can be geometrically invalid (for example
self-intersecting rings) near the box edges.
"""
from typing import List, Optional

from loguru import logger

from osm_extract.models.bbox import BoundingBox
from osm_extract.models.features import Feature
from osm_extract.models.geometry import (
    Geometry, Point, LineString, Polygon, MultiLineString
)

MIN_LINE_POINTS = 2
MIN_RING_POINTS = 4


class BoundaryClipper:
    """Clips features to a rectangular boundary.

    The boundary belongs to this instance and is set by its owner; a None
    boundary passes every feature through unchanged.
    """

    def __init__(self, boundary: Optional[BoundingBox] = None):
        self.boundary = boundary

    def set_boundary(self, boundary: Optional[BoundingBox]) -> None:
        """Replace the active boundary (None clears it)."""
        self.boundary = boundary

    def contains(self, lon: float, lat: float) -> bool:
        """Inclusive containment check; always True without a boundary."""
        if self.boundary is None:
            return True
        return self.boundary.contains(lon, lat)

    def clip_feature(self, feature: Feature) -> Optional[Feature]:
        """Clip a feature to the boundary.

        Args:
            feature: Feature to clip (not modified)

        Returns:
            New clipped Feature, the same feature when no clipping applies,
            or None if nothing usable is left
        """
        if self.boundary is None or feature.geometry is None:
            return feature

        try:
            geometry = self._clip_geometry(feature.geometry)
        except Exception as e:
            logger.warning(f"Clipping error, dropping {feature.geometry_type} feature: {e}")
            return None

        if geometry is None:
            return None
        if geometry is feature.geometry:
            return feature
        return Feature(geometry=geometry, properties=feature.properties)

    def _clip_geometry(self, geometry: Geometry) -> Optional[Geometry]:
        if isinstance(geometry, Point):
            lon, lat = geometry.coordinates[0], geometry.coordinates[1]
            return geometry if self.contains(lon, lat) else None

        if isinstance(geometry, LineString):
            coords = self.clip_line(geometry.coordinates)
            return LineString(coords) if len(coords) >= MIN_LINE_POINTS else None

        if isinstance(geometry, Polygon):
            rings = [self.clip_ring(ring) for ring in geometry.coordinates]
            if not rings or len(rings[0]) < MIN_RING_POINTS:
                return None
            return Polygon([ring for ring in rings if len(ring) >= MIN_RING_POINTS])

        if isinstance(geometry, MultiLineString):
            lines = [self.clip_line(line) for line in geometry.coordinates]
            lines = [line for line in lines if len(line) >= MIN_LINE_POINTS]
            return MultiLineString(lines) if lines else None

        # Other geometry types only arrive through uploads and are kept as-is
        return geometry

    def clip_line(self, coords: List[List[float]]) -> List[List[float]]:
        """Keep inside vertices; an outside vertex followed by an inside one
        is replaced by its clamped position on the boundary.
        """
        if self.boundary is None:
            return coords

        clipped = []
        last = len(coords) - 1

        for i, position in enumerate(coords):
            lon, lat = position[0], position[1]
            if self.contains(lon, lat):
                clipped.append([lon, lat])
            elif i < last:
                next_lon, next_lat = coords[i + 1][0], coords[i + 1][1]
                if self.contains(next_lon, next_lat):
                    clipped.append(self.boundary.clamp(lon, lat))

        return clipped

    def clip_ring(self, ring: List[List[float]]) -> List[List[float]]:
        """Keep inside vertices of a ring and re-close it.

        No edge interpolation takes place.
        """
        if self.boundary is None:
            return ring

        clipped = [[p[0], p[1]] for p in ring if self.contains(p[0], p[1])]

        if len(clipped) >= 3 and clipped[0] != clipped[-1]:
            clipped.append(list(clipped[0]))

        return clipped
