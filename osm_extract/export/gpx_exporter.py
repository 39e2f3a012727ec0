"""GPX export functionality."""
import io
from typing import Any, Dict, List, Optional

from osm_extract.config import get_config
from osm_extract.export.base import BaseExporter, utc_timestamp
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.utils.xml_utils import xml_escape


class GPXExporter(BaseExporter):
    """Export to GPX 1.1.

    Points become waypoints; lines become tracks with one segment per part;
    polygon rings become track segments.
    """

    file_suffix = '.gpx'
    media_type = 'application/gpx+xml'

    def get_format_name(self) -> str:
        return 'gpx'

    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        waypoints = io.StringIO()
        tracks = io.StringIO()

        for feature in collection.features:
            self._write_feature(feature, waypoints, tracks)

        f = io.StringIO()
        creator = xml_escape(get_config().export.generator)
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(f'<gpx version="1.1" creator="{creator}" '
                'xmlns="http://www.topografix.com/GPX/1/1">\n')
        f.write('  <metadata>\n')
        f.write(f'    <name>{xml_escape(filename_base)}</name>\n')
        f.write('    <desc>Exported from OpenStreetMap</desc>\n')
        f.write(f'    <time>{utc_timestamp()}</time>\n')
        f.write('  </metadata>\n')
        # GPX requires waypoints before tracks
        f.write(waypoints.getvalue())
        f.write(tracks.getvalue())
        f.write('</gpx>\n')

        return f.getvalue().encode('utf-8')

    def _write_feature(self, feature: Feature, waypoints: io.StringIO,
                       tracks: io.StringIO) -> None:
        geometry = feature.geometry
        geom_type = geometry.type
        props = feature.properties

        if geom_type == 'Point':
            self._write_waypoint(waypoints, geometry.coordinates, props)
        elif geom_type == 'MultiPoint':
            for position in geometry.coordinates:
                self._write_waypoint(waypoints, position, props)
        elif geom_type == 'LineString':
            self._write_track(tracks, [geometry.coordinates], props)
        elif geom_type in ('MultiLineString', 'Polygon'):
            self._write_track(tracks, geometry.coordinates, props)
        elif geom_type == 'MultiPolygon':
            self._write_track(tracks, [ring for polygon in geometry.coordinates for ring in polygon], props)
        elif geom_type == 'GeometryCollection':
            for child in geometry.geometries:
                self._write_feature(Feature(geometry=child, properties=props), waypoints, tracks)

    @staticmethod
    def _write_meta(f: io.StringIO, props: Dict[str, Any], indent: str) -> None:
        if props.get('name'):
            f.write(f'{indent}<name>{xml_escape(props["name"])}</name>\n')
        desc = '; '.join(f"{k}={v}" for k, v in props.items() if k != 'name')
        if desc:
            f.write(f'{indent}<desc>{xml_escape(desc)}</desc>\n')

    def _write_waypoint(self, f: io.StringIO, position: List[float],
                        props: Dict[str, Any]) -> None:
        f.write(f'  <wpt lat="{position[1]}" lon="{position[0]}">\n')
        self._write_meta(f, props, '    ')
        f.write('  </wpt>\n')

    def _write_track(self, f: io.StringIO, segments: List[List[List[float]]],
                     props: Dict[str, Any]) -> None:
        f.write('  <trk>\n')
        self._write_meta(f, props, '    ')
        for segment in segments:
            f.write('    <trkseg>\n')
            for position in segment:
                f.write(f'      <trkpt lat="{position[1]}" lon="{position[0]}"/>\n')
            f.write('    </trkseg>\n')
        f.write('  </trk>\n')
