"""OSM to GeoJSON geometry pipeline."""

from osm_extract.geometry.classifier import is_area_feature, AREA_TAG_KEYS
from osm_extract.geometry.properties import clean_properties
from osm_extract.geometry.clipper import BoundaryClipper
from osm_extract.geometry.converter import (
    OSMToGeoJSONConverter, ProgressEvent, osm_to_geojson
)
from osm_extract.geometry.processing import (
    split_by_geometry_type, filter_by_geometry, simplify_geometry,
    clean_geojson, bounds_of
)
from osm_extract.geometry.statistics import compute_statistics, sample_features

__all__ = [
    'is_area_feature', 'AREA_TAG_KEYS', 'clean_properties', 'BoundaryClipper',
    'OSMToGeoJSONConverter', 'ProgressEvent', 'osm_to_geojson',
    'split_by_geometry_type', 'filter_by_geometry', 'simplify_geometry',
    'clean_geojson', 'bounds_of',
    'compute_statistics', 'sample_features',
]
