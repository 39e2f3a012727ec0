"""
Overpass API client

Builds Overpass QL queries for a bounding box and fetches them with:
- Endpoint fallback
- Retry with exponential backoff
- Caching of the most recent response
"""

import hashlib
import time
from typing import Any, Dict, Iterable, List, Optional

import requests
from loguru import logger

from osm_extract.config import get_config
from osm_extract.exceptions import OverpassQueryError
from osm_extract.models.bbox import BoundingBox

# Feature group -> Overpass selectors
FEATURE_QUERIES: Dict[str, List[str]] = {
    'roads': ['way["highway"]'],
    'buildings': ['way["building"]', 'relation["building"]'],
    'water': [
        'way["water"]', 'way["waterway"]', 'way["natural"="water"]',
        'relation["water"]', 'relation["waterway"]'
    ],
    'landuse': ['way["landuse"]', 'relation["landuse"]'],
    'amenities': ['node["amenity"]', 'way["amenity"]', 'node["shop"]', 'way["shop"]'],
    'natural': ['way["natural"]', 'relation["natural"]'],
}

OSM_TYPES = ('node', 'way', 'relation')

QUERY_OUTPUT = 'out body;>;out skel qt;'


def query_timeout(bbox: BoundingBox) -> int:
    """Server-side timeout: 90s for large boxes (> 0.1 square degrees), else 60s."""
    area = abs((bbox.north - bbox.south) * (bbox.east - bbox.west))
    return 90 if area > 0.1 else 60


def build_overpass_query(bbox: BoundingBox, features: Iterable[str],
                         osm_types: Iterable[str] = OSM_TYPES,
                         all_data: bool = False) -> str:
    """
    Build an Overpass QL query for the selected feature groups.

    Args:
        bbox: Area to query
        features: Feature group names (keys of FEATURE_QUERIES)
        osm_types: Element types to include ('node', 'way', 'relation')
        all_data: Ignore feature groups and fetch every element

    Returns:
        Overpass QL query string

    Raises:
        ValueError: If no feature group is selected or nothing matches the types
    """
    box = bbox.to_overpass()
    header = f"[out:json][timeout:{query_timeout(bbox)}];"

    if all_data:
        return f"{header}(node{box};way{box};relation{box};);{QUERY_OUTPUT}"

    features = list(features)
    if not features:
        raise ValueError("Please select at least one feature type")

    osm_types = set(osm_types)
    selectors = []
    for feature in features:
        for selector in FEATURE_QUERIES.get(feature, []):
            element_type = selector.split('[', 1)[0]
            if element_type in osm_types:
                selectors.append(f"{selector}{box};")

    if not selectors:
        raise ValueError("No valid queries generated from selected features")

    return f"{header}({''.join(selectors)});{QUERY_OUTPUT}"


def check_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a decoded Overpass response.

    A missing ``elements`` array means zero results; a ``remark`` is a
    server-side query error.

    Raises:
        OverpassQueryError: If the response carries a remark
    """
    if data.get('remark'):
        raise OverpassQueryError(f"Overpass API error: {data['remark']}")
    data.setdefault('elements', [])
    return data


class OverpassClient:
    """Client for interacting with Overpass API"""

    def __init__(self, endpoints: Optional[List[str]] = None, session=None):
        self.config = get_config()
        self.endpoints = list(endpoints or self.config.api.overpass_endpoints)
        self.timeout = self.config.api.overpass_timeout
        self.session = session or requests.Session()
        self._cached_key: Optional[str] = None
        self._cached_data: Optional[Dict[str, Any]] = None

    @staticmethod
    def _cache_key(query: str) -> str:
        return hashlib.md5(query.encode('utf-8')).hexdigest()

    def clear_cache(self) -> None:
        """Forget the cached response"""
        self._cached_key = None
        self._cached_data = None

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.config.api.user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

    def _post(self, endpoint: str, query: str) -> Dict[str, Any]:
        response = self.session.post(
            endpoint,
            data={"data": query},
            headers=self._headers(),
            timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()

    def fetch(self, query: str) -> Dict[str, Any]:
        """
        Execute an Overpass query, trying each endpoint in turn

        Args:
            query: Overpass QL query string

        Returns:
            Decoded JSON response with an ``elements`` list

        Raises:
            OverpassQueryError: On a server-side remark or when every attempt fails
        """
        key = self._cache_key(query)
        if key == self._cached_key and self._cached_data is not None:
            logger.info("Using cached Overpass data")
            return self._cached_data

        api = self.config.api
        last_error: Optional[Exception] = None
        attempt = 0

        for endpoint in self.endpoints:
            for _ in range(api.max_retries):
                attempt += 1
                logger.info(f"Fetching from Overpass API: {endpoint} (attempt {attempt})")
                try:
                    data = check_response(self._post(endpoint, query))
                except OverpassQueryError:
                    raise
                except requests.exceptions.HTTPError as e:
                    last_error = e
                    status = e.response.status_code if e.response is not None else None
                    if status not in (429, 504):
                        # Not a load problem, move straight to the next endpoint
                        logger.warning(f"Overpass HTTP {status} from {endpoint}, trying next endpoint")
                        break
                    logger.warning(f"Overpass server busy (HTTP {status}), retrying")
                except (requests.exceptions.RequestException, ValueError) as e:
                    last_error = e
                    logger.warning(f"Overpass request failed (attempt {attempt}): {e}")
                else:
                    self._cached_key = key
                    self._cached_data = data
                    return data

                delay = min(api.retry_delay * (2 ** (attempt - 1)), api.max_retry_delay)
                time.sleep(delay)

        logger.error(f"OSM API failed after {attempt} attempts: {last_error}")
        raise OverpassQueryError(
            f"Unable to fetch data from any Overpass API server. {last_error or 'Unknown error'}"
        )

    def get_feature_count(self, query: str) -> Optional[int]:
        """
        Run the query in ``out count`` mode

        Returns:
            Total element count, or None if the count could not be obtained
        """
        count_query = query.replace(QUERY_OUTPUT, 'out count;')
        try:
            data = self._post(self.endpoints[0], count_query)
            return int(data['elements'][0]['tags']['total'])
        except (requests.exceptions.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            logger.warning(f"Feature count failed, no estimate available: {e}")
            return None

    def check_status(self) -> bool:
        """Whether the primary endpoint answers its status page"""
        try:
            response = self.session.get(self.endpoints[0] + '/status', timeout=self.config.api.request_timeout)
            return response.ok
        except requests.exceptions.RequestException:
            return False
