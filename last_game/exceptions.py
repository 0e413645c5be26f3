# last_game/exceptions.py
"""
Defines custom exceptions for the Last Game application.

Centralizing exceptions in this module keeps the error vocabulary in one place
and avoids circular imports between the client, the traversal code and the
CLI. Every application error derives from `LastGameError`, so callers that
only need to know "the lookup failed" can catch a single type.
"""

from typing import Optional


class LastGameError(Exception):
    """Base class for all application-specific, catchable errors."""
    pass


class ChessComApiError(LastGameError):
    """Base class for errors raised while talking to the Chess.com public API."""
    pass


class ArchiveFetchError(ChessComApiError):
    """
    Raised when a request to the Chess.com API does not succeed.

    This covers both non-200 responses and transport-level failures
    (connection refused, timeouts). For the latter there is no HTTP status.

    Attributes:
        url: The URL that was requested.
        status_code: The HTTP status returned, or None for transport failures.
    """
    def __init__(self, url: str, status_code: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            if status_code is None:
                message = f"Request failed for {url}"
            else:
                message = f"HTTP {status_code} for {url}"
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ArchivePayloadError(ChessComApiError):
    """
    Raised when the API answers 200 but the body is not the JSON we expect.
    """
    pass


class PreferencesError(LastGameError):
    """Raised when the preferences file cannot be read, parsed or written."""
    pass
