"""Allow running osm_extract as a module.

Usage:
    python -m osm_extract --help
"""

import sys
from osm_extract.cli import main

if __name__ == "__main__":
    sys.exit(main())
