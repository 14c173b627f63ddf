"""Warden API client: server and user reputation lookups.

Single lookups soften a 404 into a NotFound result so callers can tell
"not found" (a result) from "lookup failed" (an exception). Batch lookups
and raw requests raise on 404 like any other error status.
"""

from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

import httpx

from warden.clients.models import ClientConfig
from warden.clients.results import BatchLookup, Found, LookupResult, NotFound, is_flagged
from warden.config.settings import Settings, get_settings
from warden.errors import WardenAPIError
from warden.transport.executor import ApiResponse, RequestExecutor, SleepFunc

SERVER_NOT_FOUND = "Server not found"
USER_NOT_FOUND = "User not found"


class WardenAPI:
    """Async client for the Warden verification API.

    Usage:
        async with WardenAPI("wd_...") as api:
            result = await api.check_server_by_id("123")
            if result.error is None:
                print(result.server().name)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        max_retries: int | None = None,
        *,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc | None = None,
    ):
        self.config = config or ClientConfig.create(
            api_key, base_url=base_url, timeout_ms=timeout_ms, max_retries=max_retries
        )
        self._executor = RequestExecutor(self.config, http_client=http_client, sleep=sleep)

    @classmethod
    def from_env(cls, settings: Settings | None = None, **kwargs) -> "WardenAPI":
        """Build a client from WARDEN_* environment variables."""
        settings = settings or get_settings()
        return cls(config=settings.to_client_config(), **kwargs)

    async def __aenter__(self) -> "WardenAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._executor.close()

    async def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        timeout_ms: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Raw call through the retry pipeline. A 404 is raised, not softened."""
        return await self._executor.execute(
            path, method=method, body=body, timeout_ms=timeout_ms, headers=headers
        )

    async def _lookup(self, path: str, body: dict | None, not_found: str, method: str = "POST") -> LookupResult:
        try:
            response = await self._executor.execute(path, method=method, body=body)
        except WardenAPIError as e:
            if e.status_code == 404:
                return NotFound(error=not_found, rate_limit=e.rate_limit)
            raise
        return Found(payload=response.body, rate_limit=response.rate_limit)

    async def check_server_by_id(self, server_id: str) -> LookupResult:
        body = {"data": {"type": "id", "id": server_id}}
        return await self._lookup("/server", body, SERVER_NOT_FOUND)

    async def check_server_by_name(self, server_name: str) -> LookupResult:
        body = {"data": {"type": "name", "name": server_name}}
        return await self._lookup("/server", body, SERVER_NOT_FOUND)

    async def check_servers(self, servers: Iterable[Any]) -> BatchLookup:
        """Look up several servers in one request.

        Each entry is a mapping or an object with ``id`` and/or ``name``.
        Unlike the single lookups, a 404 here raises WardenAPIError.
        """
        entries = [_batch_entry(server) for server in servers]
        response = await self._executor.execute("/servers", method="POST", body={"data": {"servers": entries}})
        return BatchLookup.from_payload(response.body, rate_limit=response.rate_limit)

    async def check_user_by_id(self, user_id: str) -> LookupResult:
        body = {"data": {"type": "id", "id": user_id}}
        return await self._lookup("/user", body, USER_NOT_FOUND)

    async def check_user_by_username(self, username: str) -> LookupResult:
        body = {"data": {"type": "username", "username": username}}
        return await self._lookup("/user", body, USER_NOT_FOUND)

    async def get_server_info(self, server_id: str) -> LookupResult:
        path = f"/server/{quote(str(server_id), safe='')}"
        return await self._lookup(path, None, SERVER_NOT_FOUND, method="GET")

    async def is_server_flagged(self, server_id: str) -> bool:
        return is_flagged(await self.get_server_info(server_id))

    async def is_user_flagged(self, user_id: str) -> bool:
        return is_flagged(await self.check_user_by_id(user_id))


def _batch_entry(server: Any) -> dict[str, str]:
    if isinstance(server, Mapping):
        fields = {key: server.get(key) for key in ("id", "name")}
    else:
        fields = {key: getattr(server, key, None) for key in ("id", "name")}
    return {key: value for key, value in fields.items() if value is not None}
