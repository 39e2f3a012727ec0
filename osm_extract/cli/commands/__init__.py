"""CLI command implementations."""

from osm_extract.cli.commands import area, search, fetch, convert, stats, export

COMMANDS = {
    'area': area,
    'search': search,
    'fetch': fetch,
    'convert': convert,
    'stats': stats,
    'export': export,
}

__all__ = ['COMMANDS']
