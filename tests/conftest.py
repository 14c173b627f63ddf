"""Shared fixtures for the Warden client test suite."""

import httpx
import pytest
from unittest.mock import AsyncMock

from warden.clients.models import ClientConfig
from warden.config.settings import get_settings

TEST_API_KEY = "wd_test_key_12345678"
BASE_URL = "https://api.test.local/api/v1"


class ReplayHandler:
    """httpx.MockTransport handler that replays responses (or raises) in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def client_config() -> ClientConfig:
    """A valid config pointing at a fake base URL."""
    return ClientConfig(api_key=TEST_API_KEY, base_url=BASE_URL, timeout_ms=5000, max_retries=3)


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Records backoff delays instead of waiting."""
    return AsyncMock()


@pytest.fixture
def server_payload() -> dict:
    return {
        "id": "123",
        "name": "X",
        "type": "CHEATING",
        "flags": ["LEAKS"],
        "createdAt": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def rate_limit_headers() -> dict:
    return {
        "X-RateLimit-Limit": "100",
        "X-RateLimit-Remaining": "97",
        "X-RateLimit-Reset": "1735689600",
    }


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set WARDEN_* env vars and clear settings cache.

    Usage:
        override_settings(API_KEY="wd_abc", MAX_RETRIES="5")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(f"WARDEN_{key.upper()}", str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()
