"""KML export functionality."""
from typing import Any, Dict, List, Optional

import simplekml

from osm_extract.export.base import BaseExporter
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.utils.xml_utils import xml_escape


def _tuples(coords):
    return [tuple(p[:2]) for p in coords]


class KMLExporter(BaseExporter):
    """Export to KML with one Placemark per feature.

    Properties are written as ExtendedData; multi-part geometries become
    MultiGeometry placemarks.
    """

    file_suffix = '.kml'
    media_type = 'application/vnd.google-earth.kml+xml'

    def get_format_name(self) -> str:
        return 'kml'

    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        kml = simplekml.Kml(name=filename_base, description='Exported from OpenStreetMap')

        for index, feature in enumerate(collection.features, start=1):
            name = str(feature.properties.get('name') or f"{feature.geometry_type} {index}")
            placemark = self._add_geometry(kml, feature, name)
            if placemark is None:
                continue
            # simplekml writes Data names and values unescaped
            for key, value in feature.properties.items():
                placemark.extendeddata.newdata(name=xml_escape(key), value=xml_escape(value))

        return kml.kml().encode('utf-8')

    def _add_geometry(self, container, feature: Feature, name: str):
        """Add the feature's geometry to ``container`` as a new placemark."""
        geometry = feature.geometry
        geom_type = geometry.type

        if geom_type == 'Point':
            return container.newpoint(name=name, coords=_tuples([geometry.coordinates]))
        if geom_type == 'LineString':
            return container.newlinestring(name=name, coords=_tuples(geometry.coordinates))
        if geom_type == 'Polygon':
            return self._new_polygon(container, geometry.coordinates, name)

        if geom_type in ('MultiPoint', 'MultiLineString', 'MultiPolygon'):
            multi = container.newmultigeometry(name=name)
            for part in geometry.coordinates:
                if geom_type == 'MultiPoint':
                    multi.newpoint(coords=_tuples([part]))
                elif geom_type == 'MultiLineString':
                    multi.newlinestring(coords=_tuples(part))
                else:
                    self._new_polygon(multi, part, None)
            return multi

        if geom_type == 'GeometryCollection':
            multi = container.newmultigeometry(name=name)
            for child in geometry.geometries:
                self._add_geometry(multi, Feature(geometry=child), None)
            return multi

        return None

    @staticmethod
    def _new_polygon(container, rings, name):
        kwargs = {'outerboundaryis': _tuples(rings[0])}
        if len(rings) > 1:
            kwargs['innerboundaryis'] = [_tuples(ring) for ring in rings[1:]]
        if name is not None:
            kwargs['name'] = name
        return container.newpolygon(**kwargs)
