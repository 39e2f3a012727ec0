"""CLI main entry point with subcommand structure."""
import argparse
import sys
from typing import Optional

from loguru import logger

from osm_extract import __version__
from osm_extract.exceptions import EmptyResultError, ExtractorError


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog='osmextract',
        description='OSM Data Extractor - fetch, clip and export OpenStreetMap data',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  osmextract area --bbox 51.50 -0.13 51.52 -0.10
  osmextract search "Soho, London"
  osmextract fetch --place "Soho, London" --features roads buildings -o soho.json
  osmextract convert soho.json -o soho.geojson --progress
  osmextract stats soho.geojson --sample 5
  osmextract export soho.json -f shapefile -o exports/ --geometry Polygon
'''
    )

    # Global options
    parser.add_argument('--version', '-V', action='version',
                        version=f'osmextract {__version__}')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Suppress log output below errors')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='Increase verbosity (-v info, -vv debug)')

    subparsers = parser.add_subparsers(dest='command', title='commands',
                                       description='Available commands')

    from osm_extract.cli.commands import COMMANDS
    for module in COMMANDS.values():
        module.setup_parser(subparsers)

    return parser


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    """Route loguru output to stderr at a level picked from the flags."""
    if quiet:
        level = 'ERROR'
    elif verbose >= 2:
        level = 'DEBUG'
    elif verbose == 1:
        level = 'INFO'
    else:
        level = 'WARNING'

    logger.remove()
    logger.add(sys.stderr, level=level, format='<level>{level: <8}</level> | {message}')


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    # No command specified - show help
    if not parsed_args.command:
        parser.print_help()
        return 0

    configure_logging(parsed_args.verbose, parsed_args.quiet)

    try:
        return parsed_args.func(parsed_args)

    except FileNotFoundError as e:
        print(f"osmextract: error: File not found: {e}", file=sys.stderr)
        return 3
    except PermissionError as e:
        print(f"osmextract: error: Permission denied: {e}", file=sys.stderr)
        return 4
    except EmptyResultError as e:
        print(f"osmextract: error: {e}", file=sys.stderr)
        return 2
    except (ExtractorError, ValueError) as e:
        print(f"osmextract: error: {e}", file=sys.stderr)
        if parsed_args.verbose:
            import traceback
            traceback.print_exc()
        return 1
