"""
Uploaded boundary file parsing

Reads GeoJSON, KML and GPX files into a FeatureCollection. KML and GPX are
read with ElementTree; namespaces are ignored so KML 2.1/2.2 and GPX 1.0/1.1
files are all accepted.
"""

import json
import os
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional

from loguru import logger

from osm_extract.config import get_config
from osm_extract.exceptions import FileParseError
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.models.geometry import (
    Geometry, GeometryCollection, LineString, MultiLineString, Point, Polygon
)
from osm_extract.utils.file_utils import format_file_size
from osm_extract.utils.geo_utils import is_valid_coordinate

ALLOWED_EXTENSIONS = ('geojson', 'json', 'kml', 'gpx', 'xml')


def file_extension(path: str) -> str:
    return os.path.splitext(path)[1].lstrip('.').lower()


def validate_file(path: str) -> bool:
    """
    Check size and extension of an uploaded file

    Raises:
        FileNotFoundError: If the file does not exist
        FileParseError: If the file is too large or has an unsupported extension
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"File not found: {path}")

    max_size = get_config().export.max_upload_bytes
    if os.path.getsize(path) > max_size:
        raise FileParseError(f"File too large. Maximum size is {format_file_size(max_size)}.")

    if file_extension(path) not in ALLOWED_EXTENSIONS:
        raise FileParseError(f"Invalid file type. Allowed: {', '.join(ALLOWED_EXTENSIONS)}")

    return True


def _local_name(tag: str) -> str:
    return tag.rsplit('}', 1)[-1]


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _descendants(element: ET.Element, name: str) -> Iterator[ET.Element]:
    for node in element.iter():
        if _local_name(node.tag) == name:
            yield node


def _child_text(element: ET.Element, name: str) -> Optional[str]:
    child = _child(element, name)
    if child is None or child.text is None:
        return None
    return child.text.strip()


def _parse_xml(text: str) -> ET.Element:
    try:
        return ET.fromstring(text)
    except ET.ParseError as e:
        raise FileParseError(f"Invalid XML file format: {e}") from e


def validate_coordinates(collection: FeatureCollection) -> None:
    """
    Raises:
        FileParseError: On the first position outside WGS84 ranges
    """
    for feature in collection:
        for position in feature.geometry.iter_positions():
            lon, lat = position[0], position[1]
            if not is_valid_coordinate(lat, lon):
                raise FileParseError(f"Invalid coordinates in geometry: [{lon}, {lat}]")


def _finish(collection: FeatureCollection) -> FeatureCollection:
    if not collection.features:
        raise FileParseError("No features found in file.")
    validate_coordinates(collection)
    return collection


# GeoJSON

def parse_geojson(text: str) -> FeatureCollection:
    """Parse GeoJSON text; a single Feature becomes a one-feature collection."""
    try:
        data = json.loads(text)
    except ValueError as e:
        raise FileParseError(f"Invalid JSON format: {e}") from e

    if not isinstance(data, dict) or not data.get('type'):
        raise FileParseError("Invalid GeoJSON: missing type property.")

    try:
        collection = FeatureCollection.from_geojson(data)
    except (ValueError, TypeError) as e:
        raise FileParseError(f"Invalid geometry in file: {e}") from e

    return _finish(collection)


# KML

def _kml_positions(text: Optional[str]) -> List[List[float]]:
    positions = []
    for token in (text or '').split():
        parts = token.split(',')
        if len(parts) < 2:
            raise FileParseError(f"Invalid KML coordinate: {token}")
        try:
            positions.append([float(parts[0]), float(parts[1])])
        except ValueError as e:
            raise FileParseError(f"Invalid KML coordinate: {token}") from e
    return positions


def _kml_ring(boundary: Optional[ET.Element]) -> List[List[float]]:
    if boundary is None:
        return []
    ring = _child(boundary, 'LinearRing')
    if ring is None:
        return []
    return _kml_positions(_child_text(ring, 'coordinates'))


def _kml_geometry(element: ET.Element) -> Optional[Geometry]:
    name = _local_name(element.tag)

    if name == 'Point':
        positions = _kml_positions(_child_text(element, 'coordinates'))
        return Point(positions[0]) if positions else None

    if name == 'LineString':
        positions = _kml_positions(_child_text(element, 'coordinates'))
        return LineString(positions) if len(positions) >= 2 else None

    if name == 'Polygon':
        outer = _kml_ring(_child(element, 'outerBoundaryIs'))
        if len(outer) < 4:
            return None
        inner = [_kml_ring(b) for b in _children(element, 'innerBoundaryIs')]
        return Polygon([outer] + [ring for ring in inner if len(ring) >= 4])

    if name == 'MultiGeometry':
        parts = [g for g in (_kml_geometry(child) for child in element) if g is not None]
        if not parts:
            return None
        if len(parts) == 1:
            return parts[0]
        if all(isinstance(p, LineString) for p in parts):
            return MultiLineString([p.coordinates for p in parts])
        return GeometryCollection(parts)

    return None


def _kml_properties(placemark: ET.Element) -> Dict[str, str]:
    properties = {}
    for key in ('name', 'description'):
        value = _child_text(placemark, key)
        if value:
            properties[key] = value

    extended = _child(placemark, 'ExtendedData')
    if extended is not None:
        for data in _descendants(extended, 'Data'):
            key = data.get('name')
            value = _child_text(data, 'value')
            if key and value is not None:
                properties[key] = value
    return properties


def parse_kml(text: str) -> FeatureCollection:
    """Parse KML Placemarks (Point, LineString, Polygon, MultiGeometry)."""
    root = _parse_xml(text)
    features = []

    for placemark in _descendants(root, 'Placemark'):
        geometry = None
        for child in placemark:
            geometry = _kml_geometry(child)
            if geometry is not None:
                break
        if geometry is None:
            logger.debug(f"Skipping KML placemark without geometry: {_child_text(placemark, 'name')}")
            continue
        features.append(Feature(geometry=geometry, properties=_kml_properties(placemark)))

    return _finish(FeatureCollection(features=features))


# GPX

def _gpx_point(point: ET.Element) -> List[float]:
    try:
        return [float(point.get('lon')), float(point.get('lat'))]
    except (TypeError, ValueError) as e:
        raise FileParseError(f"Invalid GPX point: lat={point.get('lat')} lon={point.get('lon')}") from e


def _gpx_properties(element: ET.Element) -> Dict[str, str]:
    properties = {}
    for key in ('name', 'desc', 'type'):
        value = _child_text(element, key)
        if value:
            properties[key] = value
    return properties


def parse_gpx(text: str) -> FeatureCollection:
    """Parse GPX waypoints, routes and tracks."""
    root = _parse_xml(text)
    features = []

    for wpt in _children(root, 'wpt'):
        features.append(Feature(geometry=Point(_gpx_point(wpt)), properties=_gpx_properties(wpt)))

    for rte in _children(root, 'rte'):
        positions = [_gpx_point(p) for p in _children(rte, 'rtept')]
        if len(positions) >= 2:
            features.append(Feature(geometry=LineString(positions), properties=_gpx_properties(rte)))

    for trk in _children(root, 'trk'):
        segments = [
            [_gpx_point(p) for p in _children(seg, 'trkpt')]
            for seg in _children(trk, 'trkseg')
        ]
        segments = [seg for seg in segments if len(seg) >= 2]
        if not segments:
            continue
        if len(segments) == 1:
            geometry = LineString(segments[0])
        else:
            geometry = MultiLineString(segments)
        features.append(Feature(geometry=geometry, properties=_gpx_properties(trk)))

    return _finish(FeatureCollection(features=features))


def parse_xml(text: str, extension: str = 'xml') -> FeatureCollection:
    """Dispatch XML content on extension, falling back to the root element name."""
    if extension == 'kml':
        return parse_kml(text)
    if extension == 'gpx':
        return parse_gpx(text)

    root_name = _local_name(_parse_xml(text).tag).lower()
    if root_name == 'kml':
        return parse_kml(text)
    if root_name == 'gpx':
        return parse_gpx(text)
    raise FileParseError("Unrecognized XML file format. Please ensure it is a valid KML or GPX file.")


def parse_file(path: str) -> FeatureCollection:
    """
    Validate and parse a boundary file

    Args:
        path: Path to a .geojson, .json, .kml, .gpx or .xml file

    Returns:
        Non-empty FeatureCollection

    Raises:
        FileNotFoundError: If the file does not exist
        FileParseError: If the file is invalid
    """
    validate_file(path)
    extension = file_extension(path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise FileParseError(f"Failed to read file: {e}") from e

    if extension in ('geojson', 'json'):
        collection = parse_geojson(text)
    else:
        collection = parse_xml(text, extension)

    logger.info(f"Parsed {len(collection)} features from {os.path.basename(path)}")
    return collection
