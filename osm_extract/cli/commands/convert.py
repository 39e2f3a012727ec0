"""Convert command - raw Overpass JSON to GeoJSON."""
import json
import time

from osm_extract.cli.commands.common import (
    add_bbox_argument, clip_boundary_from_args, load_raw_response, print_progress
)
from osm_extract.config import get_config
from osm_extract.geometry.converter import osm_to_geojson
from osm_extract.geometry.processing import simplify_geometry


def setup_parser(subparsers):
    """Setup the convert subcommand parser."""
    parser = subparsers.add_parser(
        'convert',
        help='Convert raw Overpass JSON to GeoJSON',
        description='Convert a saved Overpass response into a GeoJSON FeatureCollection'
    )
    parser.add_argument('input', help='Raw Overpass JSON file')
    parser.add_argument('-o', '--output', required=True, help='Output GeoJSON file')

    clip = parser.add_mutually_exclusive_group()
    add_bbox_argument(clip, name='--clip-bbox', help_text='Clip features to this box')
    clip.add_argument('--boundary', help='Clip features to the extent of this file')

    parser.add_argument(
        '--precision', type=int, default=None,
        help='Round coordinates to N decimal places (default: from config)'
    )
    parser.add_argument('--progress', action='store_true', help='Show conversion progress')
    parser.add_argument('--compact', action='store_true', help='Compact output (no indentation)')
    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the convert command."""
    response = load_raw_response(args.input)
    boundary = clip_boundary_from_args(args)

    start_time = time.time()
    collection = osm_to_geojson(
        response, clip_boundary=boundary,
        on_progress=print_progress if args.progress else None
    )

    precision = args.precision
    if precision is None:
        precision = get_config().export.coordinate_precision
    collection = simplify_geometry(collection, precision)
    elapsed = time.time() - start_time

    with open(args.output, 'w', encoding='utf-8') as f:
        json.dump(collection.to_geojson(), f, indent=None if args.compact else 2)

    print(f"Converted {len(response.get('elements') or []):,} elements "
          f"to {len(collection):,} features in {elapsed:.3f}s")
    print(f"Saved to: {args.output}")
    return 0
