"""Exception hierarchy for the Warden client."""

from typing import Any

from warden.transport.ratelimit import RateLimitInfo


class WardenError(Exception):
    """Base class for every error raised by this library."""


class ConfigurationError(WardenError, ValueError):
    """Client configuration is missing or malformed. Never retried."""


class WardenAPIError(WardenError):
    """The API answered with a status the client does not retry or soften.

    Attributes:
        status_code: HTTP status of the failing response, if any.
        response_data: Decoded error body, or None when it was not JSON.
        rate_limit: Rate-limit snapshot taken from the response headers.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_data: Any = None,
        rate_limit: RateLimitInfo | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        self.rate_limit = rate_limit

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class ResponseDecodeError(WardenAPIError):
    """A successful response carried a body that is not valid JSON."""
