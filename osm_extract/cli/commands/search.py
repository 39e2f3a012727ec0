"""Search command - Nominatim place lookup."""
import json

from osm_extract.services.nominatim import search_location


def setup_parser(subparsers):
    """Setup the search subcommand parser."""
    parser = subparsers.add_parser(
        'search',
        help='Search for a place by name',
        description='Look up places with Nominatim and show their bounding boxes'
    )
    parser.add_argument('query', help='Place name')
    parser.add_argument('--limit', '-n', type=int, default=5, help='Maximum results (default: 5)')
    parser.add_argument('--json', action='store_true', help='Output raw results as JSON')
    parser.set_defaults(func=run)
    return parser


def run(args):
    """Execute the search command."""
    results = search_location(args.query, limit=args.limit)

    if args.json:
        print(json.dumps(results, indent=2))
        return 0

    if not results:
        print(f"No results found for '{args.query}'")
        return 2

    for i, result in enumerate(results, 1):
        print(f"{i}. {result.get('display_name', '')}")
        bbox = result.get('boundingbox')
        if bbox:
            south, north, west, east = bbox
            print(f"   bbox: {south} {west} {north} {east}")
    return 0
