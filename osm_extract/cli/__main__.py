"""Allow running osm_extract.cli as a module.

Usage:
    python -m osm_extract.cli --help
"""

import sys
from osm_extract.cli import main

if __name__ == "__main__":
    sys.exit(main())
