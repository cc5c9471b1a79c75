class VocalsplitError(Exception):
    """Base exception for vocalsplit."""


class FetchError(VocalsplitError):
    """Raised when a lyrics page or Genius API request fails.

    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        detail = f"HTTP {status_code}" if status_code else "no response"
        super().__init__(f"{detail} fetching {url}")


class ParseError(VocalsplitError):
    """Raised when lyrics or search hits cannot be read from a page or API response."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Parse error for {url}: {reason}")


class SourceError(VocalsplitError):
    """Raised when a local lyrics file is missing or cannot be decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read lyrics from {path}: {reason}")


class UnsupportedSiteError(VocalsplitError):
    """Raised when no lyrics adapter matches the given URL."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No lyrics adapter found for URL: {url}")
