"""Tests for CLI commands: area, search, fetch, convert, stats, export."""
import json
import zipfile
from argparse import Namespace

import pytest

from osm_extract.cli.main import create_parser, main
from osm_extract.services import overpass


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_shows_help(self, capsys):
        assert main([]) == 0
        assert 'osmextract' in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(['--version'])
        assert exc_info.value.code == 0
        assert 'osmextract 1.0.0' in capsys.readouterr().out

    def test_subcommands_registered(self):
        parser = create_parser()
        for command in ('area', 'search', 'fetch', 'convert', 'stats', 'export'):
            args = {
                'area': ['area', '--bbox', '0', '0', '1', '1'],
                'search': ['search', 'x'],
                'fetch': ['fetch', '--bbox', '0', '0', '1', '1', '-o', 'x.json'],
                'convert': ['convert', 'raw.json', '-o', 'out.geojson'],
                'stats': ['stats', 'x.geojson'],
                'export': ['export', 'raw.json', '-f', 'kml'],
            }[command]
            assert parser.parse_args(args).command == command

    def test_clip_options_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args([
                'convert', 'raw.json', '-o', 'x', '--clip-bbox', '0', '0', '1', '1',
                '--boundary', 'b.geojson'
            ])


class TestAreaCommand:
    """Tests for area command."""

    def test_area_text(self, capsys):
        assert main(['area', '--bbox', '51.50', '-0.13', '51.52', '-0.10']) == 0
        out = capsys.readouterr().out
        assert 'km²' in out
        assert 'Severity: ok' in out

    def test_area_json(self, capsys):
        assert main(['area', '--bbox', '0', '0', '1', '1', '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['severity'] == 'danger'
        assert data['area_km2'] == pytest.approx(12320.5, abs=0.1)

    def test_inverted_bbox(self, capsys):
        assert main(['area', '--bbox', '1', '0', '0', '1']) == 1
        assert 'error' in capsys.readouterr().err


class TestSearchCommand:
    """Tests for search command."""

    @pytest.fixture
    def fake_search(self, monkeypatch):
        from osm_extract.cli.commands import search

        calls = []

        def _search(query, limit=None):
            calls.append((query, limit))
            if query == 'nowhere':
                return []
            return [{'display_name': 'Soho, London',
                     'boundingbox': ['51.509', '51.517', '-0.140', '-0.128']}]

        monkeypatch.setattr(search, 'search_location', _search)
        return calls

    def test_text(self, fake_search, capsys):
        assert main(['search', 'Soho', '--limit', '3']) == 0
        out = capsys.readouterr().out
        assert '1. Soho, London' in out
        assert '51.509 -0.140 51.517 -0.128' in out
        assert fake_search == [('Soho', 3)]

    def test_json(self, fake_search, capsys):
        assert main(['search', 'Soho', '--json']) == 0
        assert json.loads(capsys.readouterr().out)[0]['display_name'] == 'Soho, London'

    def test_no_results(self, fake_search, capsys):
        assert main(['search', 'nowhere']) == 2


class TestFetchCommand:
    """Tests for fetch command."""

    @pytest.fixture
    def fake_client(self, monkeypatch, raw_response):
        from osm_extract.cli.commands import fetch

        queries = []

        class FakeClient:
            def fetch(self, query):
                queries.append(query)
                return raw_response

            def get_feature_count(self, query):
                queries.append(query)
                return 1234

        monkeypatch.setattr(fetch, 'OverpassClient', FakeClient)
        return queries

    def test_fetch_bbox(self, fake_client, tmp_path, capsys):
        output = tmp_path / 'raw.json'
        assert main(['fetch', '--bbox', '51.50', '-0.12', '51.51', '-0.10',
                     '--features', 'roads', '-o', str(output)]) == 0
        assert len(json.loads(output.read_text())['elements']) == 8
        assert 'way["highway"](51.5,-0.12,51.51,-0.1);' in fake_client[0]
        assert 'Fetched 8 elements' in capsys.readouterr().out

    def test_fetch_boundary(self, fake_client, geojson_file, tmp_path):
        output = tmp_path / 'raw.json'
        assert main(['fetch', '--boundary', str(geojson_file), '-o', str(output)]) == 0
        assert '(51.5,-0.14,51.54,-0.1)' in fake_client[0]

    def test_estimate(self, fake_client, capsys):
        assert main(['fetch', '--bbox', '51.50', '-0.12', '51.51', '-0.10', '--estimate']) == 0
        assert '1,234' in capsys.readouterr().out

    def test_area_too_large(self, fake_client, tmp_path, capsys):
        assert main(['fetch', '--bbox', '-60', '-170', '60', '170',
                     '-o', str(tmp_path / 'x.json')]) == 1
        assert 'Area too large' in capsys.readouterr().err
        assert fake_client == []

    def test_missing_output(self, fake_client, capsys):
        assert main(['fetch', '--bbox', '51.50', '-0.12', '51.51', '-0.10']) == 1

    def test_place(self, fake_client, monkeypatch, tmp_path):
        from osm_extract.cli.commands import fetch

        monkeypatch.setattr(fetch, 'search_location', lambda query, limit=None: [
            {'display_name': 'Soho', 'boundingbox': ['51.509', '51.517', '-0.140', '-0.128']}
        ])
        assert main(['fetch', '--place', 'Soho', '-o', str(tmp_path / 'x.json')]) == 0
        assert '(51.509,-0.14,51.517,-0.128)' in fake_client[0]

    def test_query_error(self, monkeypatch, tmp_path, capsys):
        from osm_extract.cli.commands import fetch
        from osm_extract.exceptions import OverpassQueryError

        class FailingClient:
            def fetch(self, query):
                raise OverpassQueryError('Overpass API error: timeout')

        monkeypatch.setattr(fetch, 'OverpassClient', FailingClient)
        assert main(['fetch', '--bbox', '51.50', '-0.12', '51.51', '-0.10',
                     '-o', str(tmp_path / 'x.json')]) == 1
        assert 'timeout' in capsys.readouterr().err


class TestConvertCommand:
    """Tests for convert command."""

    def test_convert(self, raw_file, tmp_path, capsys):
        output = tmp_path / 'out.geojson'
        assert main(['convert', str(raw_file), '-o', str(output)]) == 0
        data = json.loads(output.read_text())
        assert data['type'] == 'FeatureCollection'
        assert len(data['features']) == 5
        assert 'Converted 8 elements to 5 features' in capsys.readouterr().out

    def test_clip_bbox(self, raw_file, tmp_path):
        output = tmp_path / 'out.geojson'
        assert main(['convert', str(raw_file), '-o', str(output),
                     '--clip-bbox', '51.49', '-0.11', '51.502', '-0.09']) == 0
        names = [f['properties'].get('name') for f in json.loads(output.read_text())['features']]
        assert names == ['Corner Cafe']

    def test_precision(self, tmp_path):
        raw = tmp_path / 'raw.json'
        raw.write_text(json.dumps({'elements': [
            {'type': 'node', 'id': 1, 'lat': 51.123456789, 'lon': -0.987654321, 'tags': {'a': 'b'}}
        ]}))
        output = tmp_path / 'out.geojson'
        assert main(['convert', str(raw), '-o', str(output), '--precision', '3']) == 0
        feature = json.loads(output.read_text())['features'][0]
        assert feature['geometry']['coordinates'] == [-0.988, 51.123]

    def test_progress(self, raw_file, tmp_path, capsys):
        assert main(['convert', str(raw_file), '-o', str(tmp_path / 'o.geojson'), '--progress']) == 0
        assert '[100%] Processing complete' in capsys.readouterr().err

    def test_bare_element_array(self, tmp_path, raw_elements):
        raw = tmp_path / 'elements.json'
        raw.write_text(json.dumps(raw_elements))
        output = tmp_path / 'out.geojson'
        assert main(['convert', str(raw), '-o', str(output)]) == 0
        assert len(json.loads(output.read_text())['features']) == 5

    def test_remark(self, tmp_path, capsys):
        raw = tmp_path / 'raw.json'
        raw.write_text(json.dumps({'elements': [], 'remark': 'runtime error'}))
        assert main(['convert', str(raw), '-o', str(tmp_path / 'o.geojson')]) == 1
        assert 'runtime error' in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(['convert', str(tmp_path / 'nope.json'), '-o', str(tmp_path / 'o')]) == 3

    def test_invalid_json(self, tmp_path):
        raw = tmp_path / 'raw.json'
        raw.write_text('{broken')
        assert main(['convert', str(raw), '-o', str(tmp_path / 'o.geojson')]) == 1


class TestStatsCommand:
    """Tests for stats command."""

    def test_text(self, geojson_file, capsys):
        assert main(['stats', str(geojson_file)]) == 0
        out = capsys.readouterr().out
        assert 'Total features: 4' in out
        assert 'Points:   2' in out
        assert 'highway:primary' in out

    def test_json(self, geojson_file, capsys):
        assert main(['stats', str(geojson_file), '--json']) == 0
        data = json.loads(capsys.readouterr().out)
        assert data['total_features'] == 4
        assert data['polygons'] == 1
        assert 'sample' not in data

    def test_json_sample(self, geojson_file, capsys):
        assert main(['stats', str(geojson_file), '--json', '--sample', '3']) == 0
        data = json.loads(capsys.readouterr().out)
        assert [f['geometry']['type'] for f in data['sample']] == ['Point', 'LineString', 'Polygon']

    def test_kml_input(self, kml_file, capsys):
        assert main(['stats', str(kml_file), '--json']) == 0
        assert json.loads(capsys.readouterr().out)['total_features'] == 2

    def test_missing_file(self, tmp_path):
        assert main(['stats', str(tmp_path / 'missing.geojson')]) == 3


class TestExportCommand:
    """Tests for export command."""

    @pytest.mark.parametrize("fmt,filename", [
        ('geojson', 'raw.geojson'), ('shapefile', 'raw_shapefile.zip'),
        ('kml', 'raw.kml'), ('gpx', 'raw.gpx'), ('osm', 'raw.osm'),
    ])
    def test_formats(self, raw_file, tmp_path, fmt, filename, capsys):
        out_dir = tmp_path / 'exports'
        assert main(['export', str(raw_file), '-f', fmt, '-o', str(out_dir)]) == 0
        assert (out_dir / filename).exists()
        assert 'Saved to:' in capsys.readouterr().out

    def test_name(self, raw_file, tmp_path):
        assert main(['export', str(raw_file), '-f', 'geojson', '-o', str(tmp_path),
                     '--name', 'central london']) == 0
        assert (tmp_path / 'central_london.geojson').exists()

    def test_geometry_filter(self, raw_file, tmp_path):
        assert main(['export', str(raw_file), '-f', 'shapefile', '-o', str(tmp_path),
                     '--geometry', 'Polygon']) == 0
        names = zipfile.ZipFile(tmp_path / 'raw_shapefile.zip').namelist()
        assert 'polygons.shp' in names
        assert 'points.shp' not in names

    def test_empty_filter_exit_code(self, tmp_path, capsys):
        raw = tmp_path / 'raw.json'
        raw.write_text(json.dumps({'elements': [
            {'type': 'node', 'id': 1, 'lat': 51.5, 'lon': -0.1, 'tags': {'amenity': 'cafe'}}
        ]}))
        assert main(['export', str(raw), '-f', 'geojson', '-o', str(tmp_path),
                     '--geometry', 'Polygon']) == 2
        assert 'No features match' in capsys.readouterr().err

    def test_osm_keeps_unclipped_elements(self, raw_file, tmp_path):
        """Test the OSM XML export writes every raw element despite clipping."""
        assert main(['export', str(raw_file), '-f', 'osm', '-o', str(tmp_path),
                     '--clip-bbox', '51.49', '-0.11', '51.502', '-0.09']) == 0
        text = (tmp_path / 'raw.osm').read_text(encoding='utf-8')
        assert text.count('<node ') == 5


class TestRunDirect:
    """Tests calling command handlers without the top-level parser."""

    def test_area_run(self, capsys):
        from osm_extract.cli.commands.area import run

        assert run(Namespace(bbox=[0.0, 0.0, 0.0005, 0.0005], json=False)) == 0
        assert 'm²' in capsys.readouterr().out


class TestEntryPoints:
    """Tests for the console script wrapper and root module."""

    def test_console_main(self, monkeypatch, capsys):
        import osm_extract.cli as cli

        monkeypatch.setattr('sys.argv', ['osmextract', 'area', '--bbox', '0', '0', '1', '1'])
        assert cli.main() == 0
        assert 'Severity: danger' in capsys.readouterr().out

    def test_keyboard_interrupt(self, monkeypatch, capsys):
        import osm_extract.cli as cli

        def _interrupt():
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, '_main', _interrupt)
        assert cli.main() == 130
        assert 'Interrupted' in capsys.readouterr().err

    def test_root_module(self):
        import osmextract

        assert osmextract.__version__ == '1.0.0'
        assert callable(osmextract.main)
