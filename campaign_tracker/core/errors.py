from typing import Optional


class TrackerError(Exception):
    """Base class for failures the responder knows how to serve around."""


class UpstreamFetchError(TrackerError):
    """The campaign page answered with a non-success status or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BrowserError(TrackerError):
    """Headless browser launch, navigation or read failed."""


class ExtractionError(TrackerError):
    """No heuristic produced a plausible raised amount."""
