"""Request executor: one logical API call with timeout, retries and backoff.

Retry policy per attempt:
- 2xx            -> decode JSON and return
- 429            -> sleep Retry-After seconds (default 1), try again
- other non-2xx  -> raise WardenAPIError, no retry
- transport error (network, timeout) -> sleep 2**attempt seconds, try again

A 429 on the final attempt is raised like any other error status. A
transport error on the final attempt is re-raised unchanged.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from warden.clients.models import ClientConfig
from warden.errors import ConfigurationError, ResponseDecodeError, WardenAPIError
from warden.logging.audit import RequestTimer, call_id_var, generate_call_id, get_client_logger
from warden.transport.ratelimit import RateLimitInfo, extract_rate_limit, retry_after_seconds
from warden.version import USER_AGENT

ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE")

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass
class ApiResponse:
    status_code: int
    body: Any
    rate_limit: RateLimitInfo | None = None


class RequestExecutor:
    """Sends requests to the Warden API on behalf of one ClientConfig."""

    def __init__(
        self,
        config: ClientConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: SleepFunc | None = None,
    ):
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep or asyncio.sleep

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.timeout_seconds),
                follow_redirects=True,
            )
            self._owns_client = True
        return self._client

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "x-api-key": self.config.api_key,
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if extra:
            headers.update(extra)
        return headers

    async def execute(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        timeout_ms: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> ApiResponse:
        """Perform one logical call against ``path`` (relative to the base URL).

        Args:
            path: Endpoint path such as "/server".
            method: GET, POST, PUT or DELETE.
            body: JSON-serializable request body, or None for no body.
            timeout_ms: Per-attempt timeout override.
            headers: Extra headers merged over the defaults.

        Returns:
            ApiResponse with the decoded JSON body and rate-limit snapshot.

        Raises:
            WardenAPIError: non-2xx response (ResponseDecodeError for bad JSON).
            httpx.TransportError: network failure or timeout after all retries.
        """
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        if timeout_ms is not None and timeout_ms <= 0:
            raise ConfigurationError("Timeout must be a positive number of milliseconds")

        token = call_id_var.set(generate_call_id())
        try:
            return await self._execute_with_retries(
                url=f"{self.config.base_url}{path}",
                path=path,
                method=method,
                content=json.dumps(body) if body is not None else None,
                timeout=(timeout_ms or self.config.timeout_ms) / 1000,
                headers=self._build_headers(headers),
            )
        finally:
            call_id_var.reset(token)

    async def _execute_with_retries(
        self,
        url: str,
        path: str,
        method: str,
        content: str | None,
        timeout: float,
        headers: dict[str, str],
    ) -> ApiResponse:
        logger = get_client_logger()
        client = await self._get_client()
        max_retries = self.config.max_retries
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                logger.debug(
                    "Sending request",
                    extra={"audit_data": {"method": method, "path": path, "attempt": attempt}},
                )
                with RequestTimer() as timer:
                    response = await client.request(
                        method,
                        url,
                        content=content,
                        headers=headers,
                        timeout=timeout,
                        follow_redirects=True,
                    )

                rate_limit = extract_rate_limit(response.headers)

                if not response.is_success:
                    error_data = _safe_json(response)

                    if response.status_code == 429 and attempt < max_retries:
                        delay = retry_after_seconds(response.headers)
                        logger.warning(
                            "Rate limited, retrying",
                            extra={"audit_data": {
                                "method": method,
                                "path": path,
                                "attempt": attempt,
                                "retry_after": delay,
                            }},
                        )
                        await self._sleep(delay)
                        continue

                    raise WardenAPIError(
                        _error_message(response, error_data),
                        status_code=response.status_code,
                        response_data=error_data,
                        rate_limit=rate_limit,
                    )

                data = _decode_body(response, rate_limit)
                logger.info(
                    "Request completed",
                    extra={"audit_data": {
                        "method": method,
                        "path": path,
                        "status": response.status_code,
                        "attempt": attempt,
                        "latency_ms": timer.elapsed_ms,
                        "rate_limit_remaining": rate_limit.remaining if rate_limit else None,
                    }},
                )
                return ApiResponse(status_code=response.status_code, body=data, rate_limit=rate_limit)

            except WardenAPIError as e:
                # 404 is an ordinary outcome for single lookups
                logger.log(
                    logging.INFO if e.status_code == 404 else logging.WARNING,
                    "Request failed",
                    extra={"audit_data": {
                        "method": method,
                        "path": path,
                        "status": e.status_code,
                        "attempt": attempt,
                        "error": e.message,
                    }},
                )
                raise

            except httpx.TransportError as e:
                last_error = e
                if attempt == max_retries:
                    logger.warning(
                        "Request failed after retries",
                        extra={"audit_data": {
                            "method": method,
                            "path": path,
                            "attempts": attempt + 1,
                            "error": repr(e),
                        }},
                    )
                    raise

                delay = 2 ** attempt
                logger.warning(
                    "Transport error, backing off",
                    extra={"audit_data": {
                        "method": method,
                        "path": path,
                        "attempt": attempt,
                        "backoff_seconds": delay,
                        "error": repr(e),
                    }},
                )
                await self._sleep(delay)

        if last_error is None:
            raise WardenAPIError("Request failed without a response")
        raise last_error

    async def close(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _error_message(response: httpx.Response, error_data: Any) -> str:
    if isinstance(error_data, dict) and error_data.get("error"):
        return str(error_data["error"])
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def _decode_body(response: httpx.Response, rate_limit: RateLimitInfo | None) -> Any:
    if not response.content.strip():
        return {}
    try:
        return response.json()
    except ValueError:
        raise ResponseDecodeError(
            f"Invalid JSON in HTTP {response.status_code} response",
            status_code=response.status_code,
            response_data=response.text,
            rate_limit=rate_limit,
        )
