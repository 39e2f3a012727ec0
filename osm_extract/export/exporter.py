"""Format dispatch for exports."""
from typing import Any, Dict, Iterable, List, Optional

from osm_extract.exceptions import UnsupportedFormatError
from osm_extract.export.base import BaseExporter, ExportResult
from osm_extract.export.gpx_exporter import GPXExporter
from osm_extract.export.json_exporter import GeoJSONExporter
from osm_extract.export.kml_exporter import KMLExporter
from osm_extract.export.shapefile_exporter import ShapefileExporter
from osm_extract.export.xml_exporter import OSMXMLExporter
from osm_extract.geometry.processing import filter_by_geometry
from osm_extract.models.features import FeatureCollection
from osm_extract.utils.file_utils import sanitize_filename

EXPORTERS = {
    'geojson': GeoJSONExporter,
    'shapefile': ShapefileExporter,
    'kml': KMLExporter,
    'gpx': GPXExporter,
    'osm': OSMXMLExporter,
}

SUPPORTED_FORMATS = tuple(EXPORTERS)


def get_exporter(fmt: str) -> BaseExporter:
    """Create the exporter for a format identifier.

    Raises:
        UnsupportedFormatError: If the format is unknown
    """
    try:
        return EXPORTERS[fmt]()
    except KeyError:
        raise UnsupportedFormatError(fmt, SUPPORTED_FORMATS) from None


def export(fmt: str, collection: FeatureCollection,
           raw_elements: Optional[List[Dict[str, Any]]],
           filename_base: str,
           geometry_filter: Optional[Iterable[str]] = None) -> ExportResult:
    """Export a collection in the requested format.

    Args:
        fmt: One of 'geojson', 'shapefile', 'kml', 'gpx', 'osm'
        collection: Already clipped collection
        raw_elements: Original elements, used only by the 'osm' format
        filename_base: Filename stem (sanitized here)
        geometry_filter: Optional coarse kinds to keep

    Returns:
        ExportResult with the file contents and metadata

    Raises:
        UnsupportedFormatError: Unknown format
        EmptyResultError: The geometry filter removed every feature
    """
    exporter = get_exporter(fmt)
    filtered = filter_by_geometry(collection, geometry_filter)
    return exporter.export(filtered, raw_elements, sanitize_filename(filename_base))
