#!/usr/bin/env python3
"""
OSM Data Extractor - fetch, clip and export OpenStreetMap data

This is the CLI entry point. The implementation is in the osm_extract package.

Usage:
    osmextract area --bbox 51.50 -0.13 51.52 -0.10
    osmextract fetch --place "Soho, London" -o soho.json
    osmextract export soho.json -f kml

For more information, run: osmextract --help
"""
import sys

# Re-export public API
from osm_extract import (
    __version__,
    BoundingBox,
    FeatureCollection,
    OSMToGeoJSONConverter,
    osm_to_geojson,
    compute_statistics,
    export,
)
from osm_extract.cli import main

__all__ = [
    '__version__', 'BoundingBox', 'FeatureCollection', 'OSMToGeoJSONConverter',
    'osm_to_geojson', 'compute_statistics', 'export', 'main',
]

if __name__ == "__main__":
    sys.exit(main())
