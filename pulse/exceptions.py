class PulseError(Exception):
    """Base class for ingestion and retrieval errors."""


class ConfigError(PulseError):
    """Raised when required configuration (e.g. the store target) is missing."""


class FetchError(PulseError):
    """Raised when an upstream source cannot be fetched."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class SourceError(PulseError):
    """Raised when a source answers with a payload of the wrong shape."""
