"""Tests for export formats and dispatch."""
import io
import json
import xml.etree.ElementTree as ET
import zipfile

import pytest
import shapefile

from osm_extract.exceptions import EmptyResultError, UnsupportedFormatError
from osm_extract.export.exporter import SUPPORTED_FORMATS, export, get_exporter
from osm_extract.export.gpx_exporter import GPXExporter
from osm_extract.export.json_exporter import GeoJSONExporter
from osm_extract.export.kml_exporter import KMLExporter
from osm_extract.export.shapefile_exporter import ShapefileExporter, WGS84_PRJ
from osm_extract.export.xml_exporter import ODBL_NOTE, OSMXMLExporter
from osm_extract.models.features import Feature, FeatureCollection
from osm_extract.models.geometry import GeometryCollection, Point

GPX_NS = '{http://www.topografix.com/GPX/1/1}'


class TestDispatch:
    """Tests for format dispatch."""

    def test_supported_formats(self):
        assert set(SUPPORTED_FORMATS) == {'geojson', 'shapefile', 'kml', 'gpx', 'osm'}

    @pytest.mark.parametrize("fmt,cls", [
        ('geojson', GeoJSONExporter), ('shapefile', ShapefileExporter),
        ('kml', KMLExporter), ('gpx', GPXExporter), ('osm', OSMXMLExporter),
    ])
    def test_get_exporter(self, fmt, cls):
        assert isinstance(get_exporter(fmt), cls)

    def test_unsupported_format(self, sample_collection):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            export('dxf', sample_collection, [], 'out')
        assert exc_info.value.format == 'dxf'
        assert 'geojson' in exc_info.value.supported

    def test_filename_sanitized(self, sample_collection):
        result = export('geojson', sample_collection, [], 'my map (v2)')
        assert result.filename == 'my_map__v2_.geojson'

    def test_geometry_filter(self, sample_collection):
        result = export('geojson', sample_collection, [], 'out', geometry_filter=['Polygon'])
        data = json.loads(result.data)
        assert [f['geometry']['type'] for f in data['features']] == ['Polygon']
        assert result.metadata['total_features'] == 1

    def test_geometry_filter_empty(self):
        collection = FeatureCollection([Feature(Point([0, 0]))])
        with pytest.raises(EmptyResultError):
            export('kml', collection, [], 'out', geometry_filter=['Polygon'])


class TestExportResult:
    """Tests for ExportResult."""

    def test_byte_size_and_metadata(self, sample_collection):
        result = export('geojson', sample_collection, [], 'area')
        assert result.byte_size == len(result.data)
        assert result.metadata['format'] == 'geojson'
        assert result.metadata['filename'] == 'area.geojson'
        assert result.metadata['point_count'] == 2
        assert result.metadata['crs'] == 'EPSG:4326'

    def test_write(self, tmp_path, sample_collection):
        result = export('geojson', sample_collection, [], 'area')
        path = result.write(str(tmp_path / 'out'))
        with open(path, 'rb') as f:
            assert f.read() == result.data


class TestGeoJSONExporter:
    """Tests for GeoJSON export."""

    def test_content(self, sample_collection):
        result = GeoJSONExporter().export(sample_collection, None, 'area')
        data = json.loads(result.data.decode('utf-8'))
        assert data == sample_collection.to_geojson()


class TestShapefileExporter:
    """Tests for Shapefile ZIP export."""

    @pytest.fixture
    def archive(self, sample_collection):
        result = ShapefileExporter().export(sample_collection, None, 'area')
        assert result.filename == 'area_shapefile.zip'
        return zipfile.ZipFile(io.BytesIO(result.data))

    def _reader(self, archive, layer):
        return shapefile.Reader(
            shp=io.BytesIO(archive.read(f'{layer}.shp')),
            shx=io.BytesIO(archive.read(f'{layer}.shx')),
            dbf=io.BytesIO(archive.read(f'{layer}.dbf')),
        )

    def test_members(self, archive):
        names = set(archive.namelist())
        for layer in ('points', 'lines', 'polygons'):
            for ext in ('shp', 'shx', 'dbf', 'prj'):
                assert f'{layer}.{ext}' in names
        assert 'README.txt' in names
        assert 'metadata.json' in names

    def test_prj(self, archive):
        assert archive.read('points.prj').decode('ascii') == WGS84_PRJ

    def test_multipoint_exploded(self, archive):
        """Test the MultiPoint feature adds one record per part."""
        reader = self._reader(archive, 'points')
        assert len(reader) == 3

    def test_attributes(self, archive):
        reader = self._reader(archive, 'lines')
        record = reader.record(0).as_dict()
        assert record['name'] == 'Main Street'
        assert record['osm_feat'] == 'highway:primary'
        assert record['highway'] == 'primary'

    def test_feature_tag_keeps_own_column(self):
        """Test an OSM feature=* tag is not overwritten by the computed type column."""
        collection = FeatureCollection([
            Feature(Point([1.0, 2.0]), {'amenity': 'bench', 'feature': 'memorial'}),
        ])
        archive = zipfile.ZipFile(io.BytesIO(ShapefileExporter().export(collection, None, 'x').data))
        record = self._reader(archive, 'points').record(0).as_dict()
        assert record['feature'] == 'memorial'
        assert record['osm_feat'] == 'amenity:bench'

    def test_polygon_shape(self, archive):
        reader = self._reader(archive, 'polygons')
        assert reader.shapeType == shapefile.POLYGON
        assert len(reader.shape(0).points) == 4

    def test_metadata(self, archive):
        metadata = json.loads(archive.read('metadata.json'))
        assert metadata['layers'] == ['points', 'lines', 'polygons']
        assert metadata['skipped_features'] == 0
        assert metadata['total_features'] == 4

    def test_empty_layers_omitted(self):
        collection = FeatureCollection([
            Feature(Point([0, 0]), {'name': 'A'}),
            Feature(GeometryCollection([Point([1, 1])])),
        ])
        result = ShapefileExporter().export(collection, None, 'pts')
        archive = zipfile.ZipFile(io.BytesIO(result.data))
        assert 'lines.shp' not in archive.namelist()
        metadata = json.loads(archive.read('metadata.json'))
        assert metadata['skipped_features'] == 1

    def test_field_name_truncation(self):
        exporter = ShapefileExporter()
        assert exporter._truncate_field_name('addr:housenumber', []) == 'addr_house'
        assert exporter._truncate_field_name('addr:housename', ['addr_house']) == 'addr_hous1'


class TestKMLExporter:
    """Tests for KML export."""

    @pytest.fixture
    def kml_text(self, sample_collection):
        return KMLExporter().export(sample_collection, None, 'area').data.decode('utf-8')

    def test_placemarks(self, kml_text):
        assert kml_text.count('<Placemark') == 4

    def test_names(self, kml_text):
        assert 'Corner Cafe' in kml_text
        assert 'Main Street' in kml_text

    def test_extended_data(self, kml_text):
        assert '<Data name="highway">' in kml_text

    def test_multigeometry(self, kml_text):
        assert '<MultiGeometry' in kml_text

    def test_parses(self, kml_text):
        ET.fromstring(kml_text.encode('utf-8'))

    def test_extended_data_escaped(self):
        """Test markup characters in property values survive as data."""
        collection = FeatureCollection([
            Feature(Point([-0.1, 51.5]), {'name': 'Bread & Co', 'note': 'a < b'}),
        ])
        data = KMLExporter().export(collection, None, 'area').data
        ns = '{http://www.opengis.net/kml/2.2}'
        root = ET.fromstring(data)
        values = {
            d.get('name'): d.find(f'{ns}value').text for d in root.iter(f'{ns}Data')
        }
        assert values == {'name': 'Bread & Co', 'note': 'a < b'}


class TestGPXExporter:
    """Tests for GPX export."""

    @pytest.fixture
    def gpx_root(self, sample_collection):
        data = GPXExporter().export(sample_collection, None, 'area').data
        return ET.fromstring(data)

    def test_version(self, gpx_root):
        assert gpx_root.get('version') == '1.1'

    def test_waypoints(self, gpx_root):
        """Test the Point and both MultiPoint parts become waypoints."""
        assert len(gpx_root.findall(f'{GPX_NS}wpt')) == 3

    def test_tracks(self, gpx_root):
        tracks = gpx_root.findall(f'{GPX_NS}trk')
        assert len(tracks) == 2
        assert len(tracks[0].findall(f'{GPX_NS}trkseg/{GPX_NS}trkpt')) == 3

    def test_waypoints_before_tracks(self, gpx_root):
        tags = [child.tag for child in gpx_root]
        assert tags.index(f'{GPX_NS}trk') > max(i for i, t in enumerate(tags) if t == f'{GPX_NS}wpt')

    def test_waypoint_name(self, gpx_root):
        wpt = gpx_root.find(f'{GPX_NS}wpt')
        assert wpt.find(f'{GPX_NS}name').text == 'Corner Cafe'
        assert wpt.get('lat') == '51.5'


class TestOSMXMLExporter:
    """Tests for raw OSM XML export."""

    @pytest.fixture
    def osm_root(self, raw_elements, sample_collection):
        result = OSMXMLExporter().export(sample_collection, raw_elements, 'area')
        assert result.filename == 'area.osm'
        return ET.fromstring(result.data)

    def test_element_counts(self, osm_root):
        assert len(osm_root.findall('node')) == 5
        assert len(osm_root.findall('way')) == 2
        assert len(osm_root.findall('relation')) == 1

    def test_order(self, osm_root):
        tags = [child.tag for child in osm_root if child.tag in ('node', 'way', 'relation')]
        assert tags == ['node'] * 5 + ['way'] * 2 + ['relation']

    def test_tags_preserved(self, osm_root):
        """Test raw tags are written without property cleaning."""
        node = osm_root.find("node[@id='1']")
        tags = {t.get('k'): t.get('v') for t in node.findall('tag')}
        assert tags['created_by'] == 'JOSM'
        assert node.get('user') == 'mapper'
        assert node.get('version') == '3'

    def test_escaping(self, osm_root):
        node = osm_root.find("node[@id='5']")
        names = [t.get('v') for t in node.findall('tag') if t.get('k') == 'name']
        assert names == ['Bread & Co']

    def test_way_refs(self, osm_root):
        way = osm_root.find("way[@id='101']")
        assert [nd.get('ref') for nd in way.findall('nd')] == ['2', '3', '4', '2']

    def test_node_without_location(self):
        """Test a node missing lat/lon is written without those attributes."""
        raw = [{"type": "node", "id": 1}, {"type": "node", "id": 2, "lat": 1.5, "lon": 2.5}]
        root = ET.fromstring(OSMXMLExporter().export(FeatureCollection(), raw, 'area').data)
        bare = root.find("node[@id='1']")
        assert bare.get('lat') is None
        assert bare.get('lon') is None
        located = root.find("node[@id='2']")
        assert (located.get('lat'), located.get('lon')) == ('1.5', '2.5')

    def test_relation_members(self, osm_root):
        members = osm_root.find('relation').findall('member')
        assert [(m.get('type'), m.get('ref'), m.get('role')) for m in members] == [
            ('way', '100', ''), ('node', '1', 'stop')
        ]

    def test_note(self, osm_root):
        assert osm_root.find('note').text == ODBL_NOTE
        assert osm_root.find('meta').get('osm_base')
