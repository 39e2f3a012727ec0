"""Stats command - summary statistics for a GeoJSON file."""
import json

from osm_extract.config import get_config
from osm_extract.geometry.statistics import compute_statistics, sample_features
from osm_extract.parsing.file_parser import parse_file


def setup_parser(subparsers):
    """Setup the stats subcommand parser."""
    parser = subparsers.add_parser(
        'stats',
        help='Show statistics for a GeoJSON file',
        description='Count geometry kinds, tags and common feature types'
    )
    parser.add_argument('input', help='GeoJSON, KML or GPX file')
    parser.add_argument('--json', action='store_true', help='Output as JSON')
    parser.add_argument(
        '--sample', type=int, nargs='?', const=-1, default=None, metavar='N',
        help='Also show a sample of N features (default: from config)'
    )
    parser.set_defaults(func=run)
    return parser


def _sample_limit(value):
    if value is None:
        return 0
    if value < 0:
        return get_config().export.sample_size
    return value


def print_stats(stats):
    """Print statistics in a human-readable layout."""
    print("=" * 50)
    print("Feature Statistics")
    print("=" * 50)
    print(f"Total features: {stats.total_features:,}")
    print(f"  Points:   {stats.points:,}")
    print(f"  Lines:    {stats.lines:,}")
    print(f"  Polygons: {stats.polygons:,}")
    if stats.other:
        print(f"  Other:    {stats.other:,}")
    print(f"Tags: {stats.tag_count}")

    if stats.bounds:
        b = stats.bounds
        print(f"Bounds: {b.south:.6f} {b.west:.6f} {b.north:.6f} {b.east:.6f}")

    if stats.top_feature_types:
        print("\nTop feature types:")
        for entry in stats.top_feature_types:
            print(f"  {entry.type:<30} {entry.count:>8,}")

    if stats.tag_distribution:
        print("\nMost common tags:")
        common = sorted(stats.tag_distribution.items(), key=lambda kv: -kv[1])[:10]
        for key, count in common:
            print(f"  {key:<30} {count:>8,}")


def run(args):
    """Execute the stats command."""
    collection = parse_file(args.input)
    stats = compute_statistics(collection)
    limit = _sample_limit(args.sample)
    sample = sample_features(collection, limit) if limit else []

    if args.json:
        output = stats.to_dict()
        if limit:
            output['sample'] = [f.to_geojson() for f in sample]
        print(json.dumps(output, indent=2))
        return 0

    print_stats(stats)
    if sample:
        print(f"\nSample ({len(sample)} features):")
        for feature in sample:
            name = feature.properties.get('name', '')
            print(f"  {feature.geometry_type:<16} {name}")
    return 0
