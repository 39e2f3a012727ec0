"""OSM Element data models."""
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Iterable, Tuple

from loguru import logger

# Editing metadata carried through to the raw OSM XML export
META_FIELDS = ('version', 'timestamp', 'changeset', 'user', 'uid')


@dataclass
class OSMNode:
    """OSM Node with location and tags.

    Coordinates are None when the query service returned a node without
    a location (e.g. ``out skel`` on some mirrors).
    """
    id: int
    lat: Optional[float] = None
    lon: Optional[float] = None
    tags: Dict[str, str] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_location(self) -> bool:
        return self.lat is not None and self.lon is not None

    @property
    def position(self) -> List[float]:
        """GeoJSON [lon, lat] position."""
        return [self.lon, self.lat]


@dataclass
class OSMWay:
    """OSM Way with node references and tags.

    Node references may point at nodes that are absent from the response.
    """
    id: int
    node_refs: List[int] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_closed(self) -> bool:
        """First and last referenced ids are equal."""
        return bool(self.node_refs) and self.node_refs[0] == self.node_refs[-1]


@dataclass
class RelationMember:
    """Single relation member reference."""
    type: str  # 'node', 'way' or 'relation'
    ref: int
    role: str = ''


@dataclass
class OSMRelation:
    """OSM Relation with members and tags."""
    id: int
    members: List[RelationMember] = field(default_factory=list)
    tags: Dict[str, str] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    def get_members_by_type(self, member_type: str) -> List[RelationMember]:
        """Get all members of a specific type.

        Args:
            member_type: 'node', 'way', or 'relation'

        Returns:
            List of members matching the type
        """
        return [m for m in self.members if m.type == member_type]


def _meta(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {k: raw[k] for k in META_FIELDS if raw.get(k) is not None}


def _float_or_none(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def parse_element(raw: Dict[str, Any]):
    """Convert one raw query-service element into a model object.

    Args:
        raw: Element dict with ``type``, ``id`` and type-specific fields

    Returns:
        OSMNode, OSMWay or OSMRelation, or None for unknown element types

    Raises:
        KeyError, TypeError, ValueError: If required fields are malformed
    """
    el_type = raw.get('type')
    tags = dict(raw.get('tags') or {})

    if el_type == 'node':
        return OSMNode(
            id=raw['id'],
            lat=_float_or_none(raw.get('lat')),
            lon=_float_or_none(raw.get('lon')),
            tags=tags,
            meta=_meta(raw)
        )
    if el_type == 'way':
        return OSMWay(
            id=raw['id'],
            node_refs=list(raw.get('nodes') or []),
            tags=tags,
            meta=_meta(raw)
        )
    if el_type == 'relation':
        members = [
            RelationMember(type=m.get('type', ''), ref=m.get('ref'), role=m.get('role') or '')
            for m in raw.get('members') or []
        ]
        return OSMRelation(id=raw['id'], members=members, tags=tags, meta=_meta(raw))
    return None


def parse_elements(raw_elements: Optional[Iterable[Dict[str, Any]]]
                   ) -> Tuple[List[OSMNode], List[OSMWay], List[OSMRelation]]:
    """Partition a raw ``elements`` array into typed buckets, keeping input order.

    Malformed elements are skipped and logged, never raised.

    Returns:
        Tuple of (nodes, ways, relations)
    """
    nodes: List[OSMNode] = []
    ways: List[OSMWay] = []
    relations: List[OSMRelation] = []

    for raw in raw_elements or []:
        try:
            element = parse_element(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.debug(f"Skipping malformed element {raw!r:.80}: {e}")
            continue

        if isinstance(element, OSMNode):
            nodes.append(element)
        elif isinstance(element, OSMWay):
            ways.append(element)
        elif isinstance(element, OSMRelation):
            relations.append(element)

    return nodes, ways, relations
