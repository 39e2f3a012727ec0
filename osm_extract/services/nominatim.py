"""
Nominatim place search
"""

from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from osm_extract.config import get_config
from osm_extract.exceptions import LocationSearchError
from osm_extract.models.bbox import BoundingBox


def search_location(query: str, limit: Optional[int] = None, session=None) -> List[Dict[str, Any]]:
    """
    Search for a place by name

    Args:
        query: Free-form place name
        limit: Maximum number of results (defaults to the configured limit)
        session: Optional requests session

    Returns:
        Nominatim result dicts (``display_name``, ``lat``, ``lon``, ``boundingbox``, ...)

    Raises:
        LocationSearchError: If the request fails
    """
    api = get_config().api
    http = session or requests
    params = {"format": "json", "q": query, "limit": limit or api.search_limit}

    try:
        response = http.get(
            f"{api.nominatim_url}/search",
            params=params,
            headers={"User-Agent": api.user_agent},
            timeout=api.request_timeout
        )
        response.raise_for_status()
        results = response.json()
    except (requests.exceptions.RequestException, ValueError) as e:
        logger.error(f"Location search failed for {query!r}: {e}")
        raise LocationSearchError(f"Location search failed: {e}") from e

    logger.info(f"Nominatim returned {len(results)} results for {query!r}")
    return results


def result_bbox(result: Dict[str, Any]) -> BoundingBox:
    """Bounding box of a Nominatim result"""
    return BoundingBox.from_nominatim(result['boundingbox'])
