"""Errors raised by the REST data source."""

from typing import Optional


class APIError(RuntimeError):
    """A non-success response from the prediction market API."""

    def __init__(self, message: str, status_code: Optional[int] = None, path: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class NotFoundError(APIError):
    """404 from the API."""


class AuthenticationError(APIError):
    """401 or 403 from the API."""


class RateLimitError(APIError):
    """429 from the API after the retry budget was spent."""


def error_for_status(status_code: int, path: str, detail: str) -> APIError:
    """Build the APIError subclass matching an HTTP status."""
    message = f"GET {path} -> {status_code}: {detail}"
    if status_code == 404:
        return NotFoundError(message, status_code, path)
    if status_code in (401, 403):
        return AuthenticationError(message, status_code, path)
    if status_code == 429:
        return RateLimitError(message, status_code, path)
    return APIError(message, status_code, path)
