"""Geometry data models.

A closed set of GeoJSON geometry types. Coordinates follow GeoJSON nesting
and [lon, lat] order; positions may carry a third (elevation) value when they
come from uploaded files.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Iterator, List

Position = List[float]


def _iter_nested(coords: Any) -> Iterator[Position]:
    """Yield every position of an arbitrarily nested coordinate array."""
    if coords and isinstance(coords[0], (list, tuple)):
        for child in coords:
            yield from _iter_nested(child)
    elif coords:
        yield coords


def _map_nested(coords: Any, fn: Callable[[Position], Position]) -> Any:
    if coords and isinstance(coords[0], (list, tuple)):
        return [_map_nested(child, fn) for child in coords]
    return fn(coords)


class Geometry:
    """Base class for all geometry types."""
    type: ClassVar[str] = ''

    def iter_positions(self) -> Iterator[Position]:
        """Yield every [lon, lat] position of the geometry."""
        return _iter_nested(self.coordinates)

    def map_positions(self, fn: Callable[[Position], Position]) -> 'Geometry':
        """Return a new geometry of the same type with ``fn`` applied to each position."""
        return type(self)(_map_nested(self.coordinates, fn))

    def to_geojson(self) -> Dict[str, Any]:
        return {'type': self.type, 'coordinates': self.coordinates}


@dataclass
class Point(Geometry):
    coordinates: Position
    type: ClassVar[str] = 'Point'


@dataclass
class MultiPoint(Geometry):
    coordinates: List[Position]
    type: ClassVar[str] = 'MultiPoint'


@dataclass
class LineString(Geometry):
    coordinates: List[Position]
    type: ClassVar[str] = 'LineString'


@dataclass
class MultiLineString(Geometry):
    coordinates: List[List[Position]]
    type: ClassVar[str] = 'MultiLineString'


@dataclass
class Polygon(Geometry):
    """Polygon as a list of rings; the first ring is the exterior."""
    coordinates: List[List[Position]]
    type: ClassVar[str] = 'Polygon'


@dataclass
class MultiPolygon(Geometry):
    coordinates: List[List[List[Position]]]
    type: ClassVar[str] = 'MultiPolygon'


@dataclass
class GeometryCollection(Geometry):
    """Heterogeneous geometry group. Only produced by uploaded files."""
    geometries: List[Geometry] = field(default_factory=list)
    type: ClassVar[str] = 'GeometryCollection'

    def iter_positions(self) -> Iterator[Position]:
        for geometry in self.geometries:
            yield from geometry.iter_positions()

    def map_positions(self, fn: Callable[[Position], Position]) -> 'GeometryCollection':
        return GeometryCollection([g.map_positions(fn) for g in self.geometries])

    def to_geojson(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'geometries': [g.to_geojson() for g in self.geometries]
        }


GEOMETRY_TYPES: Dict[str, type] = {
    cls.type: cls for cls in (
        Point, MultiPoint, LineString, MultiLineString,
        Polygon, MultiPolygon, GeometryCollection
    )
}


def _to_float_position(position: Position) -> Position:
    return [float(v) for v in position]


def geometry_from_geojson(obj: Dict[str, Any]) -> Geometry:
    """Build a geometry model from a GeoJSON geometry object.

    Args:
        obj: GeoJSON geometry dict

    Returns:
        Geometry instance

    Raises:
        ValueError: If the type is unknown or coordinates are missing
    """
    if not isinstance(obj, dict):
        raise ValueError(f"Geometry must be an object, got {type(obj).__name__}")

    geom_type = obj.get('type')
    cls = GEOMETRY_TYPES.get(geom_type)
    if cls is None:
        raise ValueError(f"Unknown geometry type: {geom_type}")

    if cls is GeometryCollection:
        return GeometryCollection(
            [geometry_from_geojson(g) for g in obj.get('geometries') or []]
        )

    coords = obj.get('coordinates')
    if coords is None or (isinstance(coords, list) and not coords):
        raise ValueError(f"{geom_type} geometry has no coordinates")

    return cls(_map_nested(coords, _to_float_position))
