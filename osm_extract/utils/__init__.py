"""Utility functions for OSM processing."""

from osm_extract.utils.xml_utils import xml_attrs, xml_escape
from osm_extract.utils.geo_utils import (
    is_valid_coordinate, calculate_bbox_area, format_area, area_severity,
    bounds_from_positions, ensure_winding_order
)
from osm_extract.utils.file_utils import sanitize_filename, format_file_size

__all__ = [
    'xml_attrs',
    'xml_escape',
    'is_valid_coordinate', 'calculate_bbox_area', 'format_area', 'area_severity',
    'bounds_from_positions', 'ensure_winding_order',
    'sanitize_filename', 'format_file_size',
]
