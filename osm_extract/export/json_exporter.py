"""GeoJSON export functionality."""
import json
from typing import Any, Dict, List, Optional

from osm_extract.export.base import BaseExporter
from osm_extract.models.features import FeatureCollection


class GeoJSONExporter(BaseExporter):
    """Export the collection as a pretty-printed GeoJSON FeatureCollection."""

    file_suffix = '.geojson'
    media_type = 'application/json'

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def get_format_name(self) -> str:
        return 'geojson'

    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        return json.dumps(
            collection.to_geojson(), indent=self.indent, ensure_ascii=False
        ).encode('utf-8')
