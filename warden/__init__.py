"""Async Python client for the Warden server and user verification API."""

from warden.api import WardenAPI
from warden.clients.models import ClientConfig
from warden.clients.results import (
    BatchLookup,
    Found,
    LookupResult,
    NotFound,
    ServerInfo,
    UserInfo,
    UserType,
)
from warden.errors import ConfigurationError, ResponseDecodeError, WardenAPIError, WardenError
from warden.transport.executor import ApiResponse, RequestExecutor
from warden.transport.ratelimit import RateLimitInfo
from warden.version import VERSION as __version__

__all__ = [
    "WardenAPI",
    "RequestExecutor",
    "ClientConfig",
    "ApiResponse",
    "RateLimitInfo",
    "Found",
    "NotFound",
    "LookupResult",
    "BatchLookup",
    "ServerInfo",
    "UserInfo",
    "UserType",
    "WardenError",
    "ConfigurationError",
    "WardenAPIError",
    "ResponseDecodeError",
]
