"""Base classes for export functionality.

Exporters turn an already clipped and filtered FeatureCollection (or, for the
raw OSM XML format, the original element list) into the bytes of a single
downloadable file.
"""
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from loguru import logger

from osm_extract.config import get_config
from osm_extract.geometry.statistics import compute_statistics
from osm_extract.models.features import FeatureCollection


@dataclass
class ExportResult:
    """Exported file contents plus descriptive metadata."""
    filename: str
    data: bytes
    media_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def byte_size(self) -> int:
        return len(self.data)

    def write(self, directory: str = '.') -> str:
        """Write the file into ``directory``.

        Returns:
            Path of the written file
        """
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, self.filename)
        with open(path, 'wb') as f:
            f.write(self.data)
        logger.info(f"Wrote {self.byte_size} bytes to {path}")
        return path


def utc_timestamp() -> str:
    """Current UTC time in ISO 8601 form."""
    return datetime.now(timezone.utc).isoformat(timespec='seconds').replace('+00:00', 'Z')


def build_metadata(collection: FeatureCollection, fmt: str,
                   filename: str, **extras) -> Dict[str, Any]:
    """Build the common export metadata structure.

    Args:
        collection: Exported collection
        fmt: Format identifier
        filename: Output filename
        **extras: Additional metadata fields

    Returns:
        Metadata dictionary
    """
    stats = compute_statistics(collection)
    return {
        'export_date': utc_timestamp(),
        'format': fmt,
        'filename': filename,
        'crs': collection.crs,
        'source': 'OpenStreetMap',
        'generator': get_config().export.generator,
        'total_features': stats.total_features,
        'point_count': stats.points,
        'line_count': stats.lines,
        'polygon_count': stats.polygons,
        'other_count': stats.other,
        'tag_count': stats.tag_count,
        'top_feature_types': [
            {'type': t.type, 'count': t.count} for t in stats.top_feature_types
        ],
        'bounds': stats.bounds.to_dict() if stats.bounds else None,
        **extras
    }


class BaseExporter(ABC):
    """Abstract base class for exporters."""

    #: Appended to the filename stem
    file_suffix: str = ''
    media_type: str = 'application/octet-stream'

    @abstractmethod
    def get_format_name(self) -> str:
        """Get the format name (e.g., 'geojson', 'kml').

        Returns:
            Format name string
        """
        pass

    @abstractmethod
    def render(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> bytes:
        """Encode the data.

        Args:
            collection: Clipped and filtered collection
            raw_elements: Original unclipped query-service elements
            filename_base: Sanitized filename stem

        Returns:
            File contents
        """
        pass

    def export(self, collection: FeatureCollection,
               raw_elements: Optional[List[Dict[str, Any]]],
               filename_base: str) -> ExportResult:
        """Render and wrap the result with metadata."""
        filename = filename_base + self.file_suffix
        data = self.render(collection, raw_elements, filename_base)
        metadata = build_metadata(
            collection, self.get_format_name(), filename, byte_size=len(data)
        )
        logger.info(f"Exported {len(collection)} features as {self.get_format_name()} ({len(data)} bytes)")
        return ExportResult(filename=filename, data=data,
                            media_type=self.media_type, metadata=metadata)
