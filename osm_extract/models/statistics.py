"""GeoJSON statistics data model."""
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from osm_extract.models.bbox import BoundingBox


@dataclass(frozen=True)
class FeatureTypeCount:
    """One ``key:value`` entry of the feature-type ranking."""
    type: str
    count: int


@dataclass(frozen=True)
class GeoStatistics:
    """Read-only snapshot of a FeatureCollection.

    Recomputed wholesale by ``compute_statistics``; never updated in place.
    """
    # Feature counts
    total_features: int = 0
    points: int = 0
    lines: int = 0
    polygons: int = 0
    other: int = 0

    # Tag statistics (internal osm_id/osm_type fields excluded)
    tags: List[str] = field(default_factory=list)
    tag_distribution: Dict[str, int] = field(default_factory=dict)
    unique_values: Dict[str, List[str]] = field(default_factory=dict)

    # key:value histogram for the watch-list keys
    feature_types: Dict[str, int] = field(default_factory=dict)
    top_feature_types: List[FeatureTypeCount] = field(default_factory=list)

    # Geographic bounds, None for an empty collection
    bounds: Optional[BoundingBox] = None

    @property
    def tag_count(self) -> int:
        """Number of distinct property keys."""
        return len(self.tags)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary representation.

        Returns:
            Dict with all statistics
        """
        return {
            'total_features': self.total_features,
            'points': self.points,
            'lines': self.lines,
            'polygons': self.polygons,
            'other': self.other,
            'tags': list(self.tags),
            'tag_count': self.tag_count,
            'tag_distribution': dict(self.tag_distribution),
            'unique_values': {k: list(v) for k, v in self.unique_values.items()},
            'feature_types': dict(self.feature_types),
            'top_feature_types': [
                {'type': t.type, 'count': t.count} for t in self.top_feature_types
            ],
            'bounds': self.bounds.to_dict() if self.bounds else None
        }
