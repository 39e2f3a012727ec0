"""OSM XML export functionality.

Serializes the original, unclipped element set rather than the derived
feature collection, so tags and topology survive unchanged.
"""
import io
from typing import Any, Dict, List, Optional

from osm_extract.config import get_config
from osm_extract.export.base import BaseExporter, utc_timestamp
from osm_extract.models.elements import META_FIELDS, parse_elements
from osm_extract.models.features import FeatureCollection
from osm_extract.utils.xml_utils import xml_attrs, xml_escape

ODBL_NOTE = (
    'Data © OpenStreetMap contributors, ODbL 1.0. '
    'https://www.openstreetmap.org/copyright'
)


def _meta_attrs(meta: Dict[str, Any]) -> str:
    return xml_attrs((key, meta.get(key)) for key in META_FIELDS)


def _write_tags(f: io.StringIO, tags: Dict[str, str]) -> None:
    for k, v in tags.items():
        f.write(f'    <tag k="{xml_escape(k)}" v="{xml_escape(v)}"/>\n')


class OSMXMLExporter(BaseExporter):
    """Export to OSM XML format."""

    file_suffix = '.osm'
    media_type = 'application/xml'

    def get_format_name(self) -> str:
        return 'osm'

    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        nodes, ways, relations = parse_elements(raw_elements)

        f = io.StringIO()
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(f'<osm version="0.6" generator="{xml_escape(get_config().export.generator)}">\n')
        f.write(f'  <note>{xml_escape(ODBL_NOTE)}</note>\n')
        f.write(f'  <meta osm_base="{utc_timestamp()}"/>\n')

        # Write nodes
        for node in nodes:
            f.write(f'  <node id="{node.id}"'
                    f'{xml_attrs([("lat", node.lat), ("lon", node.lon)])}{_meta_attrs(node.meta)}')
            if node.tags:
                f.write('>\n')
                _write_tags(f, node.tags)
                f.write('  </node>\n')
            else:
                f.write('/>\n')

        # Write ways
        for way in ways:
            f.write(f'  <way id="{way.id}"{_meta_attrs(way.meta)}>\n')
            for node_ref in way.node_refs:
                f.write(f'    <nd ref="{node_ref}"/>\n')
            _write_tags(f, way.tags)
            f.write('  </way>\n')

        # Write relations
        for relation in relations:
            f.write(f'  <relation id="{relation.id}"{_meta_attrs(relation.meta)}>\n')
            for member in relation.members:
                f.write(f'    <member type="{xml_escape(member.type)}" ref="{member.ref}" '
                        f'role="{xml_escape(member.role)}"/>\n')
            _write_tags(f, relation.tags)
            f.write('  </relation>\n')

        f.write('</osm>\n')
        return f.getvalue().encode('utf-8')
