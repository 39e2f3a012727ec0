"""OSM element to GeoJSON conversion.

Turns the flat node/way/relation list returned by the query service into a
FeatureCollection:

- tagged nodes become Points
- ways become LineStrings, or Polygons when closed and area-tagged
- relations become MultiLineStrings of their member ways (roles are ignored,
  no multipolygon assembly takes place)

Output order is all points, then all way geometries, then all relation
geometries, each in input order.
"""
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from loguru import logger

from osm_extract.exceptions import OverpassQueryError
from osm_extract.geometry.classifier import is_area_feature
from osm_extract.geometry.clipper import BoundaryClipper
from osm_extract.geometry.properties import clean_properties
from osm_extract.models.bbox import BoundingBox
from osm_extract.models.elements import OSMNode, OSMWay, OSMRelation, parse_elements
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.models.geometry import Point, LineString, Polygon, MultiLineString
from osm_extract.utils.geo_utils import is_valid_coordinate

# Progress event cadence
NODE_PROGRESS_INTERVAL = 100
WAY_PROGRESS_INTERVAL = 50

STAGE_START = 'start'
STAGE_PROCESS = 'process'
STAGE_COMPLETE = 'complete'


@dataclass(frozen=True)
class ProgressEvent:
    """Coarse conversion progress notification.

    ``progress`` is an approximate percentage: 0-50 during the node pass,
    50-90 during the way pass and 100 on completion. Only the ``complete``
    event carries the resulting collection.
    """
    stage: str
    message: str
    progress: int
    collection: Optional[FeatureCollection] = None


ProgressCallback = Callable[[ProgressEvent], None]


class OSMToGeoJSONConverter:
    """Converts raw OSM elements to a GeoJSON FeatureCollection.

    Args:
        clip_boundary: Optional box every emitted feature is clipped to
    """

    def __init__(self, clip_boundary: Optional[BoundingBox] = None):
        self.clipper = BoundaryClipper(clip_boundary)

    @property
    def clip_boundary(self) -> Optional[BoundingBox]:
        return self.clipper.boundary

    def set_clip_boundary(self, boundary: Optional[BoundingBox]) -> None:
        """Replace or clear the clip boundary for subsequent conversions."""
        self.clipper.set_boundary(boundary)

    def convert(self, elements: Sequence[Dict[str, Any]],
                on_progress: Optional[ProgressCallback] = None) -> FeatureCollection:
        """Convert elements, optionally reporting progress to a callback.

        Args:
            elements: Raw element dicts from the query service
            on_progress: Called synchronously with every ProgressEvent

        Returns:
            FeatureCollection with the converted features
        """
        collection = FeatureCollection()
        for event in self.iter_convert(elements):
            if on_progress is not None:
                on_progress(event)
            if event.collection is not None:
                collection = event.collection
        return collection

    def iter_convert(self, elements: Sequence[Dict[str, Any]]) -> Iterator[ProgressEvent]:
        """Convert elements lazily, yielding progress events.

        The final event has stage ``complete`` and carries the collection.
        The conversion itself advances only as the iterator is consumed.
        """
        yield ProgressEvent(STAGE_START, 'Processing nodes...', 0)

        nodes, ways, relations = parse_elements(elements)
        node_lookup = self._build_node_lookup(nodes)
        features: List[Feature] = []

        # Nodes
        for processed, node in enumerate(nodes, start=1):
            feature = self._node_feature(node)
            if feature is not None:
                features.append(feature)

            if processed % NODE_PROGRESS_INTERVAL == 0:
                yield ProgressEvent(
                    STAGE_PROCESS, 'Processing geometries...',
                    math.floor(processed / len(nodes) * 50)
                )

        # Ways
        for processed, way in enumerate(ways, start=1):
            feature = self._way_feature(way, node_lookup)
            if feature is not None:
                features.append(feature)

            if processed % WAY_PROGRESS_INTERVAL == 0:
                yield ProgressEvent(
                    STAGE_PROCESS, 'Processing ways...',
                    50 + math.floor(processed / len(ways) * 40)
                )

        # Relations
        ways_by_id = {way.id: way for way in ways}
        for relation in relations:
            feature = self._relation_feature(relation, ways_by_id, node_lookup)
            if feature is not None:
                features.append(feature)

        collection = FeatureCollection(features=features)
        logger.debug(
            f"Converted {len(nodes)} nodes, {len(ways)} ways, {len(relations)} relations "
            f"into {len(features)} features"
        )
        yield ProgressEvent(STAGE_COMPLETE, 'Processing complete', 100, collection)

    @staticmethod
    def _build_node_lookup(nodes: List[OSMNode]) -> Dict[int, List[float]]:
        lookup = {}
        for node in nodes:
            if node.has_location and is_valid_coordinate(node.lat, node.lon):
                lookup[node.id] = node.position
            else:
                logger.debug(f"Node {node.id} has no valid location, treating as missing")
        return lookup

    @staticmethod
    def resolve_coordinates(node_refs: List[int],
                            node_lookup: Dict[int, List[float]]) -> List[List[float]]:
        """Resolve node references to positions, skipping missing nodes."""
        return [list(node_lookup[ref]) for ref in node_refs if ref in node_lookup]

    def _node_feature(self, node: OSMNode) -> Optional[Feature]:
        # Untagged nodes only exist as way vertices
        if not node.tags or not node.has_location:
            return None
        if not is_valid_coordinate(node.lat, node.lon):
            logger.debug(f"Skipping node {node.id} with invalid coordinates ({node.lat}, {node.lon})")
            return None

        feature = Feature(
            geometry=Point(node.position),
            properties=clean_properties(node.tags)
        )
        return self.clipper.clip_feature(feature)

    def _way_feature(self, way: OSMWay,
                     node_lookup: Dict[int, List[float]]) -> Optional[Feature]:
        if not way.node_refs:
            logger.debug(f"Skipping way {way.id} without node references")
            return None

        coords = self.resolve_coordinates(way.node_refs, node_lookup)
        # LineString needs at least two positions
        if len(coords) < 2:
            logger.debug(f"Skipping way {way.id}: only {len(coords)} resolvable nodes")
            return None

        # Closure is decided on referenced ids, not resolved coordinates
        if is_area_feature(way.tags, way.is_closed, len(coords)) and len(coords) > 3:
            geometry = Polygon([coords])
        else:
            geometry = LineString(coords)

        feature = Feature(geometry=geometry, properties=clean_properties(way.tags))
        return self.clipper.clip_feature(feature)

    def _relation_feature(self, relation: OSMRelation,
                          ways_by_id: Dict[int, OSMWay],
                          node_lookup: Dict[int, List[float]]) -> Optional[Feature]:
        if not relation.members:
            return None

        lines = []
        for member in relation.get_members_by_type('way'):
            way = ways_by_id.get(member.ref)
            if way is None:
                continue
            coords = self.resolve_coordinates(way.node_refs, node_lookup)
            # LineString needs at least two positions
            if len(coords) >= 2:
                lines.append(coords)

        if not lines:
            logger.debug(f"Skipping relation {relation.id}: no resolvable member ways")
            return None

        feature = Feature(
            geometry=MultiLineString(lines),
            properties=clean_properties(relation.tags)
        )
        return self.clipper.clip_feature(feature)


def osm_to_geojson(response: Dict[str, Any],
                   clip_boundary: Optional[BoundingBox] = None,
                   on_progress: Optional[ProgressCallback] = None) -> FeatureCollection:
    """Convert a whole query-service response object.

    Args:
        response: Decoded JSON with an optional ``elements`` array
        clip_boundary: Optional clipping box
        on_progress: Optional progress callback

    Returns:
        FeatureCollection (empty when ``elements`` is absent or empty)

    Raises:
        OverpassQueryError: If the response carries a server-side ``remark``
    """
    if response.get('remark'):
        raise OverpassQueryError(f"Overpass API error: {response['remark']}")

    converter = OSMToGeoJSONConverter(clip_boundary)
    return converter.convert(response.get('elements') or [], on_progress)
