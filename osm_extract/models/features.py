"""Feature and FeatureCollection data models."""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from osm_extract.models.geometry import Geometry, geometry_from_geojson

WGS84_CRS = "EPSG:4326"


@dataclass
class Feature:
    """One geometry plus its property tags."""
    geometry: Geometry
    properties: Dict[str, str] = field(default_factory=dict)

    @property
    def geometry_type(self) -> str:
        """GeoJSON type name of the geometry."""
        return self.geometry.type

    def to_geojson(self) -> Dict[str, Any]:
        """Convert to GeoJSON Feature.

        Returns:
            GeoJSON Feature dict
        """
        return {
            "type": "Feature",
            "geometry": self.geometry.to_geojson(),
            "properties": dict(self.properties)
        }

    @classmethod
    def from_geojson(cls, obj: Dict[str, Any]) -> 'Feature':
        """Create from a GeoJSON Feature dict.

        Raises:
            ValueError: If the feature has no usable geometry
        """
        if obj.get('geometry') is None:
            raise ValueError("Feature has no geometry")
        properties = obj.get('properties') or {}
        return cls(
            geometry=geometry_from_geojson(obj['geometry']),
            properties={str(k): v for k, v in properties.items()}
        )


@dataclass
class FeatureCollection:
    """Ordered features tagged with a fixed WGS84 coordinate reference.

    No reprojection ever happens; ``crs`` only labels the output.
    """
    features: List[Feature] = field(default_factory=list)
    crs: str = WGS84_CRS

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def with_features(self, features: List[Feature]) -> 'FeatureCollection':
        """New collection sharing this collection's CRS."""
        return FeatureCollection(features=list(features), crs=self.crs)

    def to_geojson(self) -> Dict[str, Any]:
        """Convert to a GeoJSON FeatureCollection with a named CRS member.

        Returns:
            GeoJSON FeatureCollection dict
        """
        return {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
            "crs": {
                "type": "name",
                "properties": {"name": self.crs}
            }
        }

    @classmethod
    def from_geojson(cls, obj: Dict[str, Any]) -> 'FeatureCollection':
        """Create from a GeoJSON FeatureCollection or single Feature.

        A single Feature is normalized to a one-element collection.

        Raises:
            ValueError: If the object is not a Feature or FeatureCollection
        """
        obj_type = obj.get('type') if isinstance(obj, dict) else None

        if obj_type == 'Feature':
            return cls(features=[Feature.from_geojson(obj)])

        if obj_type != 'FeatureCollection' or not isinstance(obj.get('features'), list):
            raise ValueError(f"Expected a GeoJSON Feature or FeatureCollection, got {obj_type!r}")

        crs = ((obj.get('crs') or {}).get('properties') or {}).get('name', WGS84_CRS)
        return cls(
            features=[Feature.from_geojson(f) for f in obj['features']],
            crs=crs
        )
