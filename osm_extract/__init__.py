"""
OSM Extract - fetch, convert, clip and export OpenStreetMap data.

Raw Overpass API responses are converted to GeoJSON, optionally clipped to a
bounding box, summarized and exported as GeoJSON, Shapefile, KML, GPX or
OSM XML.
"""

__version__ = "1.0.0"

# Data models
from osm_extract.models import (
    BoundingBox, OSMNode, OSMWay, OSMRelation, Feature, FeatureCollection, GeoStatistics
)

# Geometry pipeline
from osm_extract.geometry import (
    BoundaryClipper, OSMToGeoJSONConverter, ProgressEvent, osm_to_geojson,
    is_area_feature, clean_properties, compute_statistics, sample_features,
    split_by_geometry_type, filter_by_geometry
)

# Export
from osm_extract.export import export, get_exporter, ExportResult, SUPPORTED_FORMATS

# Utilities
from osm_extract.utils import (
    is_valid_coordinate, calculate_bbox_area, format_area, area_severity, sanitize_filename
)

from osm_extract.exceptions import (
    ExtractorError, ExportError, EmptyResultError, UnsupportedFormatError,
    OverpassQueryError, LocationSearchError, FileParseError, AreaTooLargeError
)

__all__ = [
    # Version
    '__version__',
    # Models
    'BoundingBox', 'OSMNode', 'OSMWay', 'OSMRelation',
    'Feature', 'FeatureCollection', 'GeoStatistics',
    # Geometry
    'BoundaryClipper', 'OSMToGeoJSONConverter', 'ProgressEvent', 'osm_to_geojson',
    'is_area_feature', 'clean_properties', 'compute_statistics', 'sample_features',
    'split_by_geometry_type', 'filter_by_geometry',
    # Export
    'export', 'get_exporter', 'ExportResult', 'SUPPORTED_FORMATS',
    # Utilities
    'is_valid_coordinate', 'calculate_bbox_area', 'format_area', 'area_severity',
    'sanitize_filename',
    # Errors
    'ExtractorError', 'ExportError', 'EmptyResultError', 'UnsupportedFormatError',
    'OverpassQueryError', 'LocationSearchError', 'FileParseError', 'AreaTooLargeError',
]
