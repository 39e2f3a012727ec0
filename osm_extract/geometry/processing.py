"""Collection-level geometry processing: splitting, filtering, cleanup."""
from typing import Dict, Iterable, List, Optional

from loguru import logger

from osm_extract.exceptions import EmptyResultError
from osm_extract.models.bbox import BoundingBox
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.utils.geo_utils import bounds_from_positions, is_valid_coordinate

# Coarse geometry kinds and the concrete GeoJSON types they cover
GEOMETRY_KINDS: Dict[str, tuple] = {
    'Point': ('Point', 'MultiPoint'),
    'LineString': ('LineString', 'MultiLineString'),
    'Polygon': ('Polygon', 'MultiPolygon'),
}

BUCKET_POINTS = 'points'
BUCKET_LINES = 'lines'
BUCKET_POLYGONS = 'polygons'
BUCKET_OTHER = 'other'

_BUCKET_BY_TYPE = {
    'Point': BUCKET_POINTS, 'MultiPoint': BUCKET_POINTS,
    'LineString': BUCKET_LINES, 'MultiLineString': BUCKET_LINES,
    'Polygon': BUCKET_POLYGONS, 'MultiPolygon': BUCKET_POLYGONS,
}


def geometry_bucket(geometry_type: str) -> str:
    """Map a GeoJSON type to 'points', 'lines', 'polygons' or 'other'."""
    return _BUCKET_BY_TYPE.get(geometry_type, BUCKET_OTHER)


def split_by_geometry_type(collection: FeatureCollection) -> Dict[str, FeatureCollection]:
    """Split a collection into point, line, polygon and other collections.

    Returns:
        Dict with keys 'points', 'lines', 'polygons', 'other'
    """
    buckets: Dict[str, List[Feature]] = {
        BUCKET_POINTS: [], BUCKET_LINES: [], BUCKET_POLYGONS: [], BUCKET_OTHER: []
    }
    for feature in collection.features:
        buckets[geometry_bucket(feature.geometry_type)].append(feature)

    return {name: collection.with_features(features) for name, features in buckets.items()}


def filter_by_geometry(collection: FeatureCollection,
                       kinds: Optional[Iterable[str]]) -> FeatureCollection:
    """Keep only features whose geometry falls into the requested kinds.

    Args:
        collection: Input collection
        kinds: Coarse kinds ('Point', 'LineString', 'Polygon'); None or empty
            means no filtering

    Returns:
        Filtered collection

    Raises:
        EmptyResultError: If a filter was requested and nothing matches
    """
    kinds = list(kinds or [])
    if not kinds:
        return collection

    allowed = set()
    for kind in kinds:
        allowed.update(GEOMETRY_KINDS.get(kind, ()))

    filtered = collection.with_features(
        [f for f in collection.features if f.geometry_type in allowed]
    )

    if not filtered.features:
        raise EmptyResultError(
            f"No features match the selected geometry types: {', '.join(kinds)}"
        )

    logger.debug(f"Geometry filter {kinds} kept {len(filtered)}/{len(collection)} features")
    return filtered


def simplify_geometry(collection: FeatureCollection, precision: int = 6) -> FeatureCollection:
    """Round every coordinate to ``precision`` decimal places.

    Returns:
        New collection; the input is left untouched
    """
    def _round(position):
        return [round(v, precision) for v in position]

    return collection.with_features([
        Feature(geometry=f.geometry.map_positions(_round), properties=dict(f.properties))
        for f in collection.features
    ])


def clean_geojson(collection: FeatureCollection) -> FeatureCollection:
    """Drop features with any out-of-range coordinate."""
    kept = []
    for feature in collection.features:
        if all(is_valid_coordinate(p[1], p[0]) for p in feature.geometry.iter_positions()):
            kept.append(feature)
        else:
            logger.debug(f"Dropping {feature.geometry_type} feature with invalid coordinates")
    return collection.with_features(kept)


def bounds_of(collection: FeatureCollection) -> Optional[BoundingBox]:
    """Bounding box over every position of every feature, None if empty."""
    return bounds_from_positions(
        position
        for feature in collection.features
        for position in feature.geometry.iter_positions()
    )
