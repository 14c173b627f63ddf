"""Rate-limit metadata reported by the Warden API.

Every response may carry the quota window in three headers:
- X-RateLimit-Limit
- X-RateLimit-Remaining
- X-RateLimit-Reset (epoch seconds)

Throttled responses (429) add Retry-After, in seconds.
"""

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_RETRY_AFTER_SECONDS = 1


@dataclass(frozen=True)
class RateLimitInfo:
    limit: int
    remaining: int
    reset: int
    retry_after: int | None = None


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def extract_rate_limit(headers: Mapping[str, str]) -> RateLimitInfo | None:
    """Read the quota window from response headers.

    Returns None unless all three X-RateLimit headers are present and
    numeric. Header lookup is case-insensitive when given httpx.Headers.
    """
    limit = _parse_int(headers.get("X-RateLimit-Limit"))
    remaining = _parse_int(headers.get("X-RateLimit-Remaining"))
    reset = _parse_int(headers.get("X-RateLimit-Reset"))

    if limit is None or remaining is None or reset is None:
        return None

    return RateLimitInfo(
        limit=limit,
        remaining=remaining,
        reset=reset,
        retry_after=_parse_int(headers.get("Retry-After")),
    )


def retry_after_seconds(headers: Mapping[str, str]) -> int:
    """Delay requested by a 429 response, defaulting to one second."""
    seconds = _parse_int(headers.get("Retry-After"))
    if seconds is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    return max(0, seconds)
