"""Exception hierarchy for osmextract.

Per-feature problems (missing nodes, degenerate clipped geometry) are never
raised; they are logged and the feature is dropped. Only failures that make a
whole operation meaningless surface as one of these exceptions.
"""


class ExtractorError(Exception):
    """Base class for all osmextract errors."""


class ExportError(ExtractorError):
    """Raised when an export cannot be produced."""


class EmptyResultError(ExportError):
    """Raised when a geometry filter leaves no features to export."""


class UnsupportedFormatError(ExportError):
    """Raised for an unknown export format identifier."""

    def __init__(self, fmt: str, supported=None):
        self.format = fmt
        self.supported = list(supported or [])
        message = f"Unsupported export format: {fmt}"
        if self.supported:
            message += f" (available: {', '.join(self.supported)})"
        super().__init__(message)


class OverpassQueryError(ExtractorError):
    """Raised when the Overpass API reports an error or cannot be reached."""


class LocationSearchError(ExtractorError):
    """Raised when a Nominatim place search fails."""


class FileParseError(ExtractorError):
    """Raised when an uploaded boundary or data file cannot be used."""


class AreaTooLargeError(ExtractorError):
    """Raised when a requested area exceeds the configured fetch limit."""

    def __init__(self, area_km2: float, max_area_km2: float):
        self.area_km2 = area_km2
        self.max_area_km2 = max_area_km2
        super().__init__(
            f"Area too large ({area_km2:.2f} km², max {max_area_km2:g} km²). "
            "Please select a smaller area."
        )
