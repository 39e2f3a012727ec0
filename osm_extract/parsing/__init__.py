"""Boundary file parsing (GeoJSON, KML, GPX)."""

from osm_extract.parsing.file_parser import (
    ALLOWED_EXTENSIONS, validate_file, parse_file, parse_geojson,
    parse_kml, parse_gpx, parse_xml, validate_coordinates
)

__all__ = [
    'ALLOWED_EXTENSIONS', 'validate_file', 'parse_file', 'parse_geojson',
    'parse_kml', 'parse_gpx', 'parse_xml', 'validate_coordinates',
]
