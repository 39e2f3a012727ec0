"""Tests for configuration."""
import pytest

from osm_extract.config import ExtractorConfig, get_config, validate_config


class TestConfig:
    """Tests for configuration defaults and validation."""

    def test_defaults(self):
        config = get_config()
        assert config.area.warn_km2 == 25
        assert config.area.danger_km2 == 75
        assert 'created_by' in config.properties.skip_keys
        assert config.export.crs == 'EPSG:4326'
        assert len(config.api.overpass_endpoints) >= 1

    def test_default_valid(self):
        validate_config(ExtractorConfig())

    def test_invalid_lists_all_errors(self):
        config = ExtractorConfig()
        config.api.overpass_endpoints = []
        config.area.warn_km2 = 100
        config.export.coordinate_precision = 20
        with pytest.raises(ValueError) as exc_info:
            validate_config(config)
        message = str(exc_info.value)
        assert 'overpass_endpoints' in message
        assert 'area thresholds' in message
        assert 'coordinate_precision' in message
