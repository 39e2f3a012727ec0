"""Feature property cleaning."""
from typing import Any, Dict, Iterable, Optional

from osm_extract.config import get_config


def clean_properties(tags: Optional[Dict[str, Any]],
                     skip_keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """Drop empty values and editing metadata keys from a tag mapping.

    Idempotent: cleaning an already cleaned mapping returns an equal mapping.

    Args:
        tags: Raw tag mapping (may be None)
        skip_keys: Keys to drop; defaults to the configured metadata keys

    Returns:
        New dict with the remaining tags
    """
    if not tags:
        return {}

    skip = set(get_config().properties.skip_keys if skip_keys is None else skip_keys)

    return {
        key: value for key, value in tags.items()
        if value is not None and value != '' and key not in skip
    }
