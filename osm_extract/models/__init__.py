"""Data models for OSM elements, geometries and features."""

from osm_extract.models.bbox import BoundingBox
from osm_extract.models.elements import (
    OSMNode, OSMWay, OSMRelation, RelationMember, parse_element, parse_elements
)
from osm_extract.models.geometry import (
    Geometry, Point, MultiPoint, LineString, MultiLineString,
    Polygon, MultiPolygon, GeometryCollection, geometry_from_geojson
)
from osm_extract.models.features import Feature, FeatureCollection, WGS84_CRS
from osm_extract.models.statistics import GeoStatistics, FeatureTypeCount

__all__ = [
    'BoundingBox',
    'OSMNode', 'OSMWay', 'OSMRelation', 'RelationMember', 'parse_element', 'parse_elements',
    'Geometry', 'Point', 'MultiPoint', 'LineString', 'MultiLineString',
    'Polygon', 'MultiPolygon', 'GeometryCollection', 'geometry_from_geojson',
    'Feature', 'FeatureCollection', 'WGS84_CRS',
    'GeoStatistics', 'FeatureTypeCount',
]
