"""Export functionality for various output formats."""

from osm_extract.export.base import BaseExporter, ExportResult, build_metadata
from osm_extract.export.json_exporter import GeoJSONExporter
from osm_extract.export.shapefile_exporter import ShapefileExporter
from osm_extract.export.kml_exporter import KMLExporter
from osm_extract.export.gpx_exporter import GPXExporter
from osm_extract.export.xml_exporter import OSMXMLExporter
from osm_extract.export.exporter import (
    EXPORTERS, SUPPORTED_FORMATS, get_exporter, export
)

__all__ = [
    'BaseExporter', 'ExportResult', 'build_metadata',
    'GeoJSONExporter', 'ShapefileExporter', 'KMLExporter', 'GPXExporter', 'OSMXMLExporter',
    'EXPORTERS', 'SUPPORTED_FORMATS', 'get_exporter', 'export',
]
