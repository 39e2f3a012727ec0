"""Geographic utility functions."""
import math
from typing import Iterable, List, Optional

from osm_extract.config import get_config
from osm_extract.models.bbox import BoundingBox

# Kilometres per degree used by the equirectangular area approximation
KM_PER_DEGREE = 111.0

SEVERITY_OK = 'ok'
SEVERITY_WARN = 'warn'
SEVERITY_DANGER = 'danger'


def is_valid_coordinate(lat: float, lon: float) -> bool:
    """Check that a latitude/longitude pair is within geographic range.

    Examples:
        >>> is_valid_coordinate(51.5, -0.1)
        True
        >>> is_valid_coordinate(91, 0)
        False
    """
    try:
        return -90 <= lat <= 90 and -180 <= lon <= 180
    except TypeError:
        return False


def calculate_bbox_area(bbox: BoundingBox) -> float:
    """Approximate surface area of a bounding box in square kilometres.

    Planar equirectangular approximation: one degree of latitude is taken as
    111 km and longitude spans are scaled by the cosine of the mid latitude.
    Error grows towards the poles and for very large boxes.

    Args:
        bbox: Bounding box in degrees

    Returns:
        Area in km² (never negative)

    Examples:
        >>> round(calculate_bbox_area(BoundingBox(north=1, south=0, east=1, west=0)), 1)
        12320.5
    """
    lat_span_km = (bbox.north - bbox.south) * KM_PER_DEGREE
    mid_lat = math.radians((bbox.north + bbox.south) / 2)
    lon_span_km = (bbox.east - bbox.west) * KM_PER_DEGREE * math.cos(mid_lat)
    return abs(lat_span_km * lon_span_km)


def format_area(area_km2: float) -> str:
    """Format an area for display, picking m², hectares or km².

    Examples:
        >>> format_area(0.005)
        '5000 m²'
        >>> format_area(0.5)
        '50.00 hectares'
        >>> format_area(12.3456)
        '12.35 km²'
    """
    if area_km2 < 0.01:
        return f"{area_km2 * 1_000_000:.0f} m²"
    if area_km2 < 1:
        return f"{area_km2 * 100:.2f} hectares"
    return f"{area_km2:.2f} km²"


def area_severity(area_km2: float) -> str:
    """Classify an area into 'ok', 'warn' or 'danger' using the configured thresholds."""
    thresholds = get_config().area
    if area_km2 < thresholds.warn_km2:
        return SEVERITY_OK
    if area_km2 < thresholds.danger_km2:
        return SEVERITY_WARN
    return SEVERITY_DANGER


def bounds_from_positions(positions: Iterable[List[float]]) -> Optional[BoundingBox]:
    """Componentwise min/max over [lon, lat] positions.

    Returns:
        BoundingBox, or None when there are no positions
    """
    min_lon = min_lat = math.inf
    max_lon = max_lat = -math.inf

    for position in positions:
        lon, lat = position[0], position[1]
        min_lon = min(min_lon, lon)
        max_lon = max(max_lon, lon)
        min_lat = min(min_lat, lat)
        max_lat = max(max_lat, lat)

    if min_lat == math.inf:
        return None

    return BoundingBox(north=max_lat, south=min_lat, east=max_lon, west=min_lon)


def get_signed_area(coordinates: List[List[float]]) -> float:
    """Calculate signed area of a ring using shoelace formula.

    Positive area indicates counter-clockwise winding.
    Negative area indicates clockwise winding.

    Args:
        coordinates: List of [lon, lat] coordinate pairs (GeoJSON format)

    Returns:
        Signed area (positive = CCW, negative = CW)
    """
    if len(coordinates) < 3:
        return 0.0

    area = 0.0
    n = len(coordinates)

    for i in range(n):
        j = (i + 1) % n
        area += coordinates[i][0] * coordinates[j][1]
        area -= coordinates[j][0] * coordinates[i][1]

    return area / 2.0


def ensure_winding_order(coordinates: List[List[float]],
                         desired: str = 'ccw') -> List[List[float]]:
    """Ensure ring has the desired winding order.

    Args:
        coordinates: Ring coordinates as [[lon, lat], ...]
        desired: 'ccw' for counter-clockwise or 'cw' for clockwise

    Returns:
        Coordinates with correct winding (reversed if necessary)
    """
    if len(coordinates) < 3:
        return coordinates

    current = 'ccw' if get_signed_area(coordinates) > 0 else 'cw'

    if current != desired:
        return list(reversed(coordinates))

    return coordinates
