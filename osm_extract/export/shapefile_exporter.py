"""Shapefile archive export functionality.

Shapefiles require homogeneous geometry types, so the archive holds one
shapefile set per non-empty geometry kind:
- points.shp for Point and MultiPoint geometries
- lines.shp for LineString and MultiLineString geometries
- polygons.shp for Polygon and MultiPolygon geometries

together with README.txt and metadata.json.
"""
import io
import json
import re
import zipfile
from typing import Any, Dict, List, Optional

import shapefile

from osm_extract.export.base import BaseExporter, build_metadata, utc_timestamp
from osm_extract.geometry.processing import (
    BUCKET_POINTS, BUCKET_LINES, BUCKET_POLYGONS, BUCKET_OTHER, split_by_geometry_type
)
from osm_extract.geometry.statistics import FEATURE_TYPE_KEYS
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.utils.geo_utils import ensure_winding_order

# WGS84 projection definition for .prj file
WGS84_PRJ = (
    'GEOGCS["GCS_WGS_1984",DATUM["D_WGS_1984",'
    'SPHEROID["WGS_1984",6378137,298.257223563]],'
    'PRIMEM["Greenwich",0],UNIT["Degree",0.017453292519943295]]'
)

LAYER_SHAPE_TYPES = {
    BUCKET_POINTS: shapefile.POINT,
    BUCKET_LINES: shapefile.POLYLINE,
    BUCKET_POLYGONS: shapefile.POLYGON,
}

_UNSAFE_FIELD_CHARS = re.compile(r'[^A-Za-z0-9_]')


class ShapefileExporter(BaseExporter):
    """Export to a ZIP archive of ESRI shapefiles split by geometry kind.

    Each shapefile includes:
    - .shp - geometry data
    - .shx - shape index
    - .dbf - attribute data
    - .prj - WGS84 projection definition
    """

    file_suffix = '_shapefile.zip'
    media_type = 'application/zip'

    # Maximum field name length for DBF format
    MAX_FIELD_NAME = 10

    # Maximum DBF character field size
    MAX_FIELD_SIZE = 254

    # Standard attribute fields
    STANDARD_FIELDS = [
        ('name', 'C', 100),        # feature name
        ('osm_feat', 'C', 60),     # first key:value of the feature-type keys
    ]

    def __init__(self, include_all_tags: bool = True):
        """Initialize Shapefile exporter.

        Args:
            include_all_tags: Include every property as a DBF field
        """
        self.include_all_tags = include_all_tags

    def get_format_name(self) -> str:
        return 'shapefile'

    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        separated = split_by_geometry_type(collection)
        buffer = io.BytesIO()

        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
            archive.writestr('README.txt', self._readme(collection.crs))

            layers = []
            for layer, shape_type in LAYER_SHAPE_TYPES.items():
                features = separated[layer].features
                if not features:
                    continue
                for name, data in self._write_layer(layer, features, shape_type).items():
                    archive.writestr(name, data)
                layers.append(layer)

            metadata = build_metadata(
                collection, self.get_format_name(), filename_base + self.file_suffix,
                layers=layers,
                skipped_features=len(separated[BUCKET_OTHER].features)
            )
            archive.writestr('metadata.json', json.dumps(metadata, indent=2))

        return buffer.getvalue()

    def _readme(self, crs: str) -> str:
        return (
            "OpenStreetMap Data Export\n"
            f"Generated: {utc_timestamp()}\n"
            f"Coordinate Reference System: {crs}\n"
            "\n"
            "This ZIP contains shapefiles separated by geometry type for easier import into GIS software.\n"
            "\n"
            "Files:\n"
            "- points.shp: Point features\n"
            "- lines.shp: Line features\n"
            "- polygons.shp: Polygon features\n"
            "\n"
            f"All files use {crs} coordinate system.\n"
        )

    def _write_layer(self, layer: str, features: List[Feature],
                     shape_type: int) -> Dict[str, bytes]:
        """Write one shapefile set in memory.

        Returns:
            Mapping of archive member name to file contents
        """
        shp, shx, dbf = io.BytesIO(), io.BytesIO(), io.BytesIO()
        w = shapefile.Writer(shp=shp, shx=shx, dbf=dbf, shapeType=shape_type)

        # Define standard fields
        for name, ftype, size in self.STANDARD_FIELDS:
            w.field(name, ftype, size)

        # Add extra fields (with name truncation for DBF compatibility)
        field_mapping = {}  # original -> truncated
        if self.include_all_tags:
            used = [name for name, _, _ in self.STANDARD_FIELDS]
            keys = sorted({k for f in features for k in f.properties} - set(used))
            for key in keys:
                truncated = self._truncate_field_name(key, used)
                field_mapping[key] = truncated
                used.append(truncated)
                w.field(truncated, 'C', self.MAX_FIELD_SIZE)

        for feature in features:
            self._write_feature(w, feature, field_mapping)

        w.close()

        return {
            f"{layer}.shp": shp.getvalue(),
            f"{layer}.shx": shx.getvalue(),
            f"{layer}.dbf": dbf.getvalue(),
            f"{layer}.prj": WGS84_PRJ.encode('ascii'),
        }

    def _truncate_field_name(self, name: str, existing: List[str]) -> str:
        """Truncate field name to DBF limit, ensuring uniqueness.

        Args:
            name: Original field name
            existing: Already used field names

        Returns:
            Unique truncated field name (max 10 chars)
        """
        name = _UNSAFE_FIELD_CHARS.sub('_', name) or 'field'
        truncated = name[:self.MAX_FIELD_NAME]

        if truncated not in existing:
            return truncated

        # Add numeric suffix if needed
        counter = 1
        while True:
            suffix = str(counter)
            max_base = self.MAX_FIELD_NAME - len(suffix)
            candidate = f"{name[:max_base]}{suffix}"
            if candidate not in existing:
                return candidate
            counter += 1

    def _record(self, feature: Feature, field_mapping: Dict[str, str]) -> Dict[str, str]:
        props = feature.properties
        feature_type = next(
            (f"{key}:{props[key]}" for key in FEATURE_TYPE_KEYS if props.get(key)), ''
        )
        record = {
            'name': str(props.get('name', ''))[:100],
            'osm_feat': feature_type[:60],
        }
        for orig, trunc in field_mapping.items():
            value = props.get(orig)
            # Truncate long values to prevent DBF errors
            record[trunc] = str(value)[:self.MAX_FIELD_SIZE] if value is not None else ''
        return record

    def _write_feature(self, writer, feature: Feature,
                       field_mapping: Dict[str, str]) -> None:
        """Write a single feature (one or more shape records).

        Args:
            writer: shapefile.Writer instance
            feature: Feature to write
            field_mapping: Map of original field names to truncated names
        """
        geometry = feature.geometry
        record = self._record(feature, field_mapping)
        geom_type = geometry.type

        if geom_type == 'Point':
            writer.point(geometry.coordinates[0], geometry.coordinates[1])
            writer.record(**record)

        elif geom_type == 'MultiPoint':
            # A POINT layer holds single points; repeat the attributes per part
            for lon, lat, *_ in geometry.coordinates:
                writer.point(lon, lat)
                writer.record(**record)

        elif geom_type == 'LineString':
            writer.line([self._xy(geometry.coordinates)])
            writer.record(**record)

        elif geom_type == 'MultiLineString':
            writer.line([self._xy(line) for line in geometry.coordinates])
            writer.record(**record)

        elif geom_type in ('Polygon', 'MultiPolygon'):
            polygons = geometry.coordinates if geom_type == 'MultiPolygon' else [geometry.coordinates]
            rings = []
            for polygon in polygons:
                for i, ring in enumerate(polygon):
                    # Shapefiles use clockwise winding for outer rings (opposite of GeoJSON)
                    rings.append(ensure_winding_order(self._xy(ring), 'cw' if i == 0 else 'ccw'))
            writer.poly(rings)
            writer.record(**record)

    @staticmethod
    def _xy(coords: List[List[float]]) -> List[List[float]]:
        return [[p[0], p[1]] for p in coords]
