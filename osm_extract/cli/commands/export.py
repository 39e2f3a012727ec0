"""Export command - raw Overpass JSON to a download format."""
import os

from osm_extract.cli.commands.common import (
    add_bbox_argument, clip_boundary_from_args, load_raw_response, print_progress
)
from osm_extract.export.exporter import SUPPORTED_FORMATS, export
from osm_extract.geometry.converter import osm_to_geojson
from osm_extract.geometry.processing import GEOMETRY_KINDS
from osm_extract.utils.file_utils import format_file_size


def setup_parser(subparsers):
    """Setup the export subcommand parser."""
    parser = subparsers.add_parser(
        'export',
        help='Export raw Overpass JSON to GeoJSON, Shapefile, KML, GPX or OSM XML',
        description='Convert a saved Overpass response and write it in a download format'
    )
    parser.add_argument('input', help='Raw Overpass JSON file')
    parser.add_argument('-f', '--format', required=True, choices=SUPPORTED_FORMATS,
                        help='Output format')
    parser.add_argument('-o', '--output-dir', default='.', help='Output directory (default: .)')
    parser.add_argument('--name', default=None, help='Output filename base (default: input name)')
    parser.add_argument(
        '--geometry', nargs='+', choices=sorted(GEOMETRY_KINDS), default=None,
        help='Only export these geometry kinds'
    )

    clip = parser.add_mutually_exclusive_group()
    add_bbox_argument(clip, name='--clip-bbox', help_text='Clip features to this box')
    clip.add_argument('--boundary', help='Clip features to the extent of this file')

    parser.add_argument('--progress', action='store_true', help='Show conversion progress')
    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the export command."""
    response = load_raw_response(args.input)
    elements = response.get('elements') or []
    collection = osm_to_geojson(
        response, clip_boundary=clip_boundary_from_args(args),
        on_progress=print_progress if args.progress else None
    )

    name = args.name or os.path.splitext(os.path.basename(args.input))[0]
    result = export(args.format, collection, elements, name, geometry_filter=args.geometry)
    path = result.write(args.output_dir)

    print(f"Exported {len(collection):,} features as {args.format}")
    print(f"Saved to: {path} ({format_file_size(result.byte_size)})")
    return 0
