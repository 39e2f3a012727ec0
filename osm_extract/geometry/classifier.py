"""Area-versus-line classification for closed ways.

Raw OSM ways do not say whether they describe a line or an area. The rules
below follow common cartographic convention and must stay stable so that the
same input always yields the same geometry types.
"""
from typing import Dict, Optional

# Presence of any of these keys makes a closed way an area
AREA_TAG_KEYS = (
    'building', 'landuse', 'amenity', 'leisure', 'tourism',
    'aeroway', 'natural', 'place', 'shop', 'office',
    'craft', 'military', 'public_transport'
)

AREA_NATURAL_VALUES = frozenset({'water', 'wood', 'scrub', 'wetland'})

# 'waterway' is not an area key; only these values force an area
AREA_WATERWAY_VALUES = frozenset({'riverbank', 'dock'})


def is_area_feature(tags: Optional[Dict[str, str]], is_closed: bool,
                    vertex_count: int) -> bool:
    """Decide whether a way should be rendered as a polygon.

    Args:
        tags: Way tags (may be None)
        is_closed: First and last node references are identical
        vertex_count: Number of resolved coordinates

    Returns:
        True for an area (Polygon), False for a line (LineString)
    """
    if not is_closed or vertex_count < 4:
        return False
    if not tags:
        return False

    # Explicit override wins over every heuristic below
    if tags.get('area') == 'yes':
        return True
    if tags.get('area') == 'no':
        return False

    if any(tags.get(key) for key in AREA_TAG_KEYS):
        return True

    if tags.get('natural') in AREA_NATURAL_VALUES:
        return True
    if tags.get('waterway') in AREA_WATERWAY_VALUES:
        return True

    return False
