"""Area command - size check for a bounding box."""
import json

from osm_extract.cli.commands.common import add_bbox_argument, bbox_from_values
from osm_extract.utils.geo_utils import area_severity, calculate_bbox_area, format_area


def setup_parser(subparsers):
    """Setup the area subcommand parser."""
    parser = subparsers.add_parser(
        'area',
        help='Show the approximate area of a bounding box',
        description='Approximate the area of a bounding box and classify its size'
    )
    add_bbox_argument(parser, required=True)
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the area command."""
    bbox = bbox_from_values(args.bbox)
    area_km2 = calculate_bbox_area(bbox)
    severity = area_severity(area_km2)

    if args.json:
        print(json.dumps({
            'area_km2': round(area_km2, 4),
            'formatted': format_area(area_km2),
            'severity': severity,
            'bbox': bbox.to_dict(),
        }, indent=2))
        return 0

    print(f"Area:     {format_area(area_km2)}")
    print(f"Severity: {severity}")
    if severity != 'ok':
        print("Large areas may take longer to fetch and process.")
    return 0
