"""Command-line interface for osmextract.

This module provides the CLI entry point for the osmextract command.

Usage:
    # After pip install:
    osmextract --help
    osmextract fetch --bbox 51.50 -0.13 51.52 -0.10 -o raw.json
    osmextract export raw.json -f kml

    # Or via Python:
    python -m osm_extract
"""

import sys
from osm_extract.cli.main import main as _main, create_parser

__all__ = ['main', 'create_parser']


def main() -> int:
    """Entry point for the osmextract CLI.

    Wraps the actual main function to ensure proper exit code handling.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return _main() or 0
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"osmextract: fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
