"""Filename and file size helpers."""
import math
import re

from osm_extract.config import get_config

_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9_-]')


def sanitize_filename(name: str) -> str:
    """Replace characters outside [A-Za-z0-9_-] with '_' and cap the length.

    Examples:
        >>> sanitize_filename("my map (v2).geojson")
        'my_map__v2__geojson'
    """
    max_length = get_config().export.max_filename_length
    return _UNSAFE_FILENAME_CHARS.sub('_', name)[:max_length]


def format_file_size(size_bytes: int) -> str:
    """Human readable file size.

    Examples:
        >>> format_file_size(0)
        '0 Bytes'
        >>> format_file_size(1536)
        '1.5 KB'
    """
    if size_bytes <= 0:
        return '0 Bytes'
    units = ['Bytes', 'KB', 'MB', 'GB']
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(units) - 1)
    value = round(size_bytes / math.pow(1024, i), 2)
    if value == int(value):
        value = int(value)
    return f"{value} {units[i]}"
