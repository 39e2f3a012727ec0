"""
Configuration settings for osmextract
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class APIConfig:
    """Remote service endpoints and request settings"""
    # Overpass endpoints, tried in order
    overpass_endpoints: List[str] = field(default_factory=lambda: [
        "https://overpass-api.de/api/interpreter",
        "https://overpass.kumi.systems/api/interpreter",
        "https://overpass.openstreetmap.ru/api/interpreter",
    ])
    overpass_timeout: int = 90  # seconds, per HTTP request

    # Nominatim (place search)
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    search_limit: int = 5

    # Request settings
    request_timeout: int = 30
    max_retries: int = 2  # attempts per endpoint
    retry_delay: float = 1.0
    max_retry_delay: float = 5.0

    user_agent: str = "OSM-Data-Extractor/1.0"


@dataclass
class AreaConfig:
    """Area thresholds in square kilometres"""
    warn_km2: float = 25.0
    danger_km2: float = 75.0
    max_fetch_km2: float = 100000.0


@dataclass
class PropertyConfig:
    """Tag handling"""
    # Metadata keys stripped from feature properties
    skip_keys: List[str] = field(default_factory=lambda: [
        "created_by", "source", "source:ref", "attribution",
    ])


@dataclass
class ExportConfig:
    """Export and upload settings"""
    generator: str = "OSM Data Extractor"
    crs: str = "EPSG:4326"
    coordinate_precision: int = 6
    sample_size: int = 10
    max_upload_bytes: int = 10 * 1024 * 1024
    max_filename_length: int = 100


@dataclass
class ExtractorConfig:
    """Top-level configuration"""
    api: APIConfig = field(default_factory=APIConfig)
    area: AreaConfig = field(default_factory=AreaConfig)
    properties: PropertyConfig = field(default_factory=PropertyConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


# Global config instance
config = ExtractorConfig()


def get_config() -> ExtractorConfig:
    """Get global configuration"""
    return config


def validate_config(config: ExtractorConfig) -> None:
    """
    Validate configuration values.
    Raises ValueError listing every invalid value.
    """
    errors = []

    if not config.api.overpass_endpoints:
        errors.append("api.overpass_endpoints must contain at least one URL")
    if not config.api.nominatim_url:
        errors.append("api.nominatim_url is required but not set")
    if config.api.max_retries < 1:
        errors.append(f"api.max_retries must be at least 1, got {config.api.max_retries}")
    if config.api.request_timeout <= 0:
        errors.append(f"api.request_timeout must be positive, got {config.api.request_timeout}")

    if not 0 < config.area.warn_km2 < config.area.danger_km2:
        errors.append(
            f"area thresholds must satisfy 0 < warn < danger, "
            f"got warn={config.area.warn_km2} danger={config.area.danger_km2}"
        )
    if config.area.max_fetch_km2 <= 0:
        errors.append(f"area.max_fetch_km2 must be positive, got {config.area.max_fetch_km2}")

    if not 0 <= config.export.coordinate_precision <= 15:
        errors.append(
            f"export.coordinate_precision must be between 0 and 15, "
            f"got {config.export.coordinate_precision}"
        )
    if config.export.max_upload_bytes <= 0:
        errors.append(f"export.max_upload_bytes must be positive, got {config.export.max_upload_bytes}")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)
