"""Statistics and preview sampling for feature collections."""
import math
from collections import Counter, defaultdict
from typing import List

from osm_extract.geometry.processing import (
    BUCKET_POINTS, BUCKET_LINES, BUCKET_POLYGONS, BUCKET_OTHER,
    bounds_of, geometry_bucket
)
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.models.statistics import GeoStatistics, FeatureTypeCount

# Keys whose key:value pairs are counted as feature types
FEATURE_TYPE_KEYS = (
    'highway', 'building', 'amenity', 'natural',
    'landuse', 'waterway', 'shop', 'leisure'
)

# Keys whose distinct values are listed
UNIQUE_VALUE_KEYS = ('highway', 'building', 'amenity', 'natural', 'landuse')

INTERNAL_KEYS = frozenset({'osm_id', 'osm_type'})

TOP_FEATURE_TYPES = 10

SAMPLE_TYPES = ('Point', 'LineString', 'Polygon')


def compute_statistics(collection: FeatureCollection) -> GeoStatistics:
    """Aggregate counts, tag usage and bounds in a single pass.

    Args:
        collection: Collection to analyse

    Returns:
        GeoStatistics snapshot
    """
    buckets = Counter()
    tags = set()
    tag_distribution = Counter()
    unique_values = defaultdict(list)
    feature_types = Counter()

    for feature in collection.features:
        buckets[geometry_bucket(feature.geometry_type)] += 1
        properties = feature.properties or {}

        for key in FEATURE_TYPE_KEYS:
            if properties.get(key):
                feature_types[f"{key}:{properties[key]}"] += 1

        for key, value in properties.items():
            if key in INTERNAL_KEYS:
                continue
            tags.add(key)
            tag_distribution[key] += 1
            if key in UNIQUE_VALUE_KEYS and value not in unique_values[key]:
                unique_values[key].append(value)

    # sorted() is stable, so ties keep first-seen order
    ranked = sorted(feature_types.items(), key=lambda item: item[1], reverse=True)

    return GeoStatistics(
        total_features=len(collection.features),
        points=buckets[BUCKET_POINTS],
        lines=buckets[BUCKET_LINES],
        polygons=buckets[BUCKET_POLYGONS],
        other=buckets[BUCKET_OTHER],
        tags=sorted(tags),
        tag_distribution=dict(tag_distribution),
        unique_values=dict(unique_values),
        feature_types=dict(feature_types),
        top_feature_types=[
            FeatureTypeCount(type=t, count=c) for t, c in ranked[:TOP_FEATURE_TYPES]
        ],
        bounds=bounds_of(collection)
    )


def sample_features(collection: FeatureCollection, limit: int = 10) -> List[Feature]:
    """Pick a small preview sample spread across geometry types.

    Takes up to ceil(limit / 3) features of each of Point, LineString and
    Polygon (in that order, collection order within a type), then truncates
    to ``limit``.
    """
    if limit <= 0 or not collection.features:
        return []

    per_type = math.ceil(limit / len(SAMPLE_TYPES))
    samples: List[Feature] = []

    for geom_type in SAMPLE_TYPES:
        of_type = [f for f in collection.features if f.geometry_type == geom_type]
        samples.extend(of_type[:per_type])

    return samples[:limit]
