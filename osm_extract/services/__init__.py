"""
External service clients

- Overpass: OSM data queries
- Nominatim: place search
"""

from osm_extract.services.overpass import OverpassClient, build_overpass_query, check_response, FEATURE_QUERIES
from osm_extract.services.nominatim import search_location, result_bbox

__all__ = [
    "OverpassClient",
    "build_overpass_query",
    "check_response",
    "FEATURE_QUERIES",
    "search_location",
    "result_bbox",
]
