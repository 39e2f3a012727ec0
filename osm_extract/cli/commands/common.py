"""Argument helpers shared by the subcommands."""
import json
import os
import sys
from typing import Any, Dict, Optional

from osm_extract.exceptions import FileParseError
from osm_extract.geometry.processing import bounds_of
from osm_extract.models.bbox import BoundingBox
from osm_extract.parsing.file_parser import parse_file


def add_bbox_argument(parser, name='--bbox', required=False, help_text='Bounding box'):
    parser.add_argument(
        name, nargs=4, type=float, metavar=('S', 'W', 'N', 'E'),
        required=required, help=f'{help_text} (south west north east)'
    )


def bbox_from_values(values) -> BoundingBox:
    """Build a BoundingBox from [south, west, north, east]."""
    south, west, north, east = values
    return BoundingBox.from_sw_ne(south, west, north, east)


def boundary_from_file(path: str) -> BoundingBox:
    """Bounding box enclosing every feature of a GeoJSON, KML or GPX file."""
    bbox = bounds_of(parse_file(path))
    if bbox is None:
        raise FileParseError(f"No coordinates found in {path}")
    return bbox


def clip_boundary_from_args(args) -> Optional[BoundingBox]:
    """Clip box from --clip-bbox or --boundary, None when neither is given."""
    if getattr(args, 'clip_bbox', None):
        return bbox_from_values(args.clip_bbox)
    if getattr(args, 'boundary', None):
        return boundary_from_file(args.boundary)
    return None


def load_raw_response(path: str) -> Dict[str, Any]:
    """Load a saved Overpass response.

    A bare JSON array is accepted as the ``elements`` list.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(path)

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise FileParseError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, list):
        return {'elements': data}
    if not isinstance(data, dict):
        raise FileParseError(f"Expected an Overpass JSON object in {path}")
    return data


def print_progress(event) -> None:
    """Progress callback printing a single updating line to stderr."""
    end = '\n' if event.stage == 'complete' else '\r'
    print(f"[{event.progress:3d}%] {event.message}", end=end, file=sys.stderr, flush=True)
