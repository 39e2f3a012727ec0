"""Fetch command - download OSM data from the Overpass API."""
import json
import sys
import time

from osm_extract.cli.commands.common import add_bbox_argument, bbox_from_values, boundary_from_file
from osm_extract.config import get_config
from osm_extract.exceptions import AreaTooLargeError, LocationSearchError
from osm_extract.models.bbox import BoundingBox
from osm_extract.services.nominatim import result_bbox, search_location
from osm_extract.services.overpass import FEATURE_QUERIES, OSM_TYPES, OverpassClient, build_overpass_query
from osm_extract.utils.geo_utils import SEVERITY_DANGER, area_severity, calculate_bbox_area, format_area


def setup_parser(subparsers):
    """Setup the fetch subcommand parser."""
    parser = subparsers.add_parser(
        'fetch',
        help='Download OSM data for an area',
        description='Query the Overpass API for an area and save the raw JSON response'
    )

    source = parser.add_mutually_exclusive_group(required=True)
    add_bbox_argument(source, help_text='Area to fetch')
    source.add_argument('--place', help='Place name (first Nominatim match is used)')
    source.add_argument('--boundary', help='GeoJSON, KML or GPX file whose extent is fetched')

    parser.add_argument(
        '--features', nargs='+', choices=sorted(FEATURE_QUERIES),
        default=['roads', 'buildings'],
        help='Feature groups to fetch (default: roads buildings)'
    )
    parser.add_argument(
        '--types', nargs='+', choices=OSM_TYPES, default=list(OSM_TYPES),
        help='OSM element types to include (default: all)'
    )
    parser.add_argument('--all-data', action='store_true',
                        help='Fetch every element in the area, ignoring --features')
    parser.add_argument('--estimate', action='store_true',
                        help='Only print the element count the query would return')
    parser.add_argument('-o', '--output', help='Output JSON file')
    parser.set_defaults(func=run)
    return parser


def resolve_area(args) -> BoundingBox:
    """Area to fetch from --bbox, --place or --boundary."""
    if args.bbox:
        return bbox_from_values(args.bbox)
    if args.boundary:
        return boundary_from_file(args.boundary)

    results = search_location(args.place, limit=1)
    if not results:
        raise LocationSearchError(f"No results found for '{args.place}'")
    print(f"Using: {results[0].get('display_name', args.place)}", file=sys.stderr)
    return result_bbox(results[0])


def check_area(bbox: BoundingBox) -> float:
    """Refuse areas above the configured limit, warn on very large ones.

    Raises:
        AreaTooLargeError: If the area exceeds the fetch limit
    """
    area_km2 = calculate_bbox_area(bbox)
    max_km2 = get_config().area.max_fetch_km2
    if area_km2 > max_km2:
        raise AreaTooLargeError(area_km2, max_km2)
    if area_severity(area_km2) == SEVERITY_DANGER:
        print(f"Warning: very large area ({format_area(area_km2)}), the query may time out",
              file=sys.stderr)
    return area_km2


def run(args):
    """Execute the fetch command."""
    bbox = resolve_area(args)
    area_km2 = check_area(bbox)
    query = build_overpass_query(bbox, args.features, args.types, all_data=args.all_data)
    client = OverpassClient()

    if args.estimate:
        count = client.get_feature_count(query)
        if count is None:
            print("Feature count unavailable", file=sys.stderr)
            return 1
        print(f"Estimated elements: {count:,}")
        return 0

    if not args.output:
        print("osmextract: error: -o/--output is required unless --estimate is given",
              file=sys.stderr)
        return 1

    start_time = time.time()
    data = client.fetch(query)
    elapsed = time.time() - start_time

    with open(args.output, 'w', encoding='utf-8') as f:
        json.dump(data, f)

    print(f"Fetched {len(data['elements']):,} elements for {format_area(area_km2)} "
          f"in {elapsed:.2f}s")
    print(f"Saved to: {args.output}")
    return 0
