"""Pytest fixtures for osmextract tests."""
import json

import pytest

from osm_extract.models.bbox import BoundingBox
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.models.geometry import LineString, MultiPoint, Point, Polygon


@pytest.fixture
def square_nodes():
    """Four untagged nodes at the corners of a unit square."""
    return [
        {"type": "node", "id": 1, "lat": 0.0, "lon": 0.0},
        {"type": "node", "id": 2, "lat": 0.0, "lon": 1.0},
        {"type": "node", "id": 3, "lat": 1.0, "lon": 1.0},
        {"type": "node", "id": 4, "lat": 1.0, "lon": 0.0},
    ]


@pytest.fixture
def building_elements(square_nodes):
    """Closed building way around the unit square."""
    return square_nodes + [
        {"type": "way", "id": 100, "nodes": [1, 2, 3, 4, 1], "tags": {"building": "yes"}},
    ]


@pytest.fixture
def raw_elements():
    """Mixed element set: tagged nodes, a road, a building and a route relation."""
    return [
        {"type": "node", "id": 1, "lat": 51.50, "lon": -0.10,
         "tags": {"amenity": "cafe", "name": "Corner Cafe", "created_by": "JOSM"},
         "version": 3, "user": "mapper", "uid": 42, "changeset": 7,
         "timestamp": "2024-01-01T00:00:00Z"},
        {"type": "node", "id": 2, "lat": 51.51, "lon": -0.11},
        {"type": "node", "id": 3, "lat": 51.52, "lon": -0.12},
        {"type": "node", "id": 4, "lat": 51.51, "lon": -0.12},
        {"type": "node", "id": 5, "lat": 51.505, "lon": -0.115,
         "tags": {"shop": "bakery", "name": "Bread & Co"}},
        {"type": "way", "id": 100, "nodes": [1, 2, 3],
         "tags": {"highway": "primary", "name": "Main Street"}},
        {"type": "way", "id": 101, "nodes": [2, 3, 4, 2],
         "tags": {"building": "residential", "name": "Test Building"}},
        {"type": "relation", "id": 200,
         "members": [{"type": "way", "ref": 100, "role": ""},
                     {"type": "node", "ref": 1, "role": "stop"}],
         "tags": {"type": "route", "route": "bus", "name": "Route 1"}},
    ]


@pytest.fixture
def raw_response(raw_elements):
    """Overpass-style response wrapping the mixed element set."""
    return {"version": 0.6, "generator": "Overpass API", "elements": raw_elements}


@pytest.fixture
def raw_file(tmp_path, raw_response):
    """Raw Overpass response saved to disk."""
    file = tmp_path / "raw.json"
    file.write_text(json.dumps(raw_response))
    return file


@pytest.fixture
def unit_box():
    """Box spanning lon 0..1, lat 0..1."""
    return BoundingBox(north=1.0, south=0.0, east=1.0, west=0.0)


@pytest.fixture
def sample_collection():
    """Collection with one feature of each common geometry kind."""
    return FeatureCollection(features=[
        Feature(Point([-0.1, 51.5]), {"amenity": "cafe", "name": "Corner Cafe"}),
        Feature(LineString([[-0.1, 51.5], [-0.11, 51.51], [-0.12, 51.52]]),
                {"highway": "primary", "name": "Main Street"}),
        Feature(Polygon([[[-0.11, 51.51], [-0.12, 51.52], [-0.12, 51.51], [-0.11, 51.51]]]),
                {"building": "residential"}),
        Feature(MultiPoint([[-0.13, 51.53], [-0.14, 51.54]]), {"natural": "tree"}),
    ])


@pytest.fixture
def geojson_file(tmp_path, sample_collection):
    """GeoJSON file with the sample collection."""
    file = tmp_path / "features.geojson"
    file.write_text(json.dumps(sample_collection.to_geojson()))
    return file


@pytest.fixture
def kml_file(tmp_path):
    """KML file with one point and one polygon placemark."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
  <Document>
    <Placemark>
      <name>Office</name>
      <Point><coordinates>-0.1,51.5,0</coordinates></Point>
    </Placemark>
    <Placemark>
      <name>Park</name>
      <ExtendedData><Data name="leisure"><value>park</value></Data></ExtendedData>
      <Polygon>
        <outerBoundaryIs><LinearRing><coordinates>
          -0.12,51.50 -0.10,51.50 -0.10,51.52 -0.12,51.52 -0.12,51.50
        </coordinates></LinearRing></outerBoundaryIs>
      </Polygon>
    </Placemark>
  </Document>
</kml>'''
    file = tmp_path / "area.kml"
    file.write_text(content)
    return file


@pytest.fixture
def gpx_file(tmp_path):
    """GPX file with a waypoint and a two-segment track."""
    content = '''<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <wpt lat="51.5" lon="-0.1"><name>Start</name></wpt>
  <trk>
    <name>Morning run</name>
    <trkseg>
      <trkpt lat="51.50" lon="-0.10"/>
      <trkpt lat="51.51" lon="-0.11"/>
    </trkseg>
    <trkseg>
      <trkpt lat="51.52" lon="-0.12"/>
      <trkpt lat="51.53" lon="-0.13"/>
    </trkseg>
  </trk>
</gpx>'''
    file = tmp_path / "route.gpx"
    file.write_text(content)
    return file
