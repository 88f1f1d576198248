"""httpx clients for the SendGrid API.

Each client has a single ``request`` path. Any HTTP response is returned as
an ``httpx.Response``, whatever its status; callers decide what a status
means. Retryable statuses and transport errors are retried under the
RequestPolicy, and a transport error on the last attempt is raised as a
ConnectorError.
"""

import asyncio
import logging
import time
from typing import Any, Mapping, Optional, Union

import httpx

from .base import ApiKeyAuth, ConnectionError, ConnectorError, RequestPolicy, TimeoutError

logger = logging.getLogger(__name__)


def retry_after_seconds(headers: Mapping[str, str]) -> Optional[float]:
    """Seconds from a Retry-After header, or None when absent or not a number."""
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        # HTTP-date form; SendGrid sends seconds
        return None


def connector_error(exc: httpx.HTTPError) -> ConnectorError:
    """The ConnectorError reported for an httpx exception."""
    if isinstance(exc, httpx.TimeoutException):
        return TimeoutError(f"Request timed out: {exc}")
    if isinstance(exc, httpx.TransportError):
        return ConnectionError(f"Could not reach SendGrid: {exc}")
    return ConnectorError(f"HTTP error: {exc}")


class _ClientBase:
    """Settings and retry arithmetic shared by the sync and async clients."""

    def __init__(
        self,
        auth: Optional[ApiKeyAuth] = None,
        policy: Optional[RequestPolicy] = None,
        base_url: str = "",
        transport: Optional[Union[httpx.BaseTransport, httpx.AsyncBaseTransport]] = None,
    ):
        """Set up a client.

        Args:
            auth: API key sent with every request
            policy: Timeouts and retries
            base_url: Prefix for request paths
            transport: httpx transport override (tests use MockTransport)
        """
        self.auth = auth
        self.policy = policy or RequestPolicy()
        self.base_url = base_url.rstrip("/")
        self.transport = transport

    def _client_options(self) -> dict:
        headers = {"User-Agent": self.policy.user_agent, **self.policy.default_headers}
        if self.auth:
            headers.update(self.auth.get_headers())
        timeout = httpx.Timeout(
            self.policy.read_timeout,
            connect=self.policy.connect_timeout,
            pool=self.policy.pool_timeout,
        )
        return {"headers": headers, "timeout": timeout, "transport": self.transport}

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _backoff(self, attempt: int) -> float:
        return self.policy.retry_delay * (self.policy.retry_backoff ** attempt)

    def _retry_delay(self, attempt: int, response: httpx.Response) -> Optional[float]:
        """Wait before retrying ``response``, or None when it is final."""
        if attempt >= self.policy.max_retries:
            return None
        if response.status_code not in self.policy.retry_on_status:
            return None
        retry_after = retry_after_seconds(response.headers)
        return self._backoff(attempt) if retry_after is None else retry_after

    def _error_delay(self, attempt: int, exc: httpx.HTTPError) -> float:
        """Wait before retrying after ``exc``; raises on the last attempt."""
        if attempt >= self.policy.max_retries:
            raise connector_error(exc) from exc
        return self._backoff(attempt)


class HTTPClient(_ClientBase):
    """Blocking client over ``httpx.Client``."""

    def request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        url = self._url(path)
        attempt = 0
        with httpx.Client(**self._client_options()) as client:
            while True:
                try:
                    response = client.request(method, url, json=json)
                except httpx.HTTPError as exc:
                    delay = self._error_delay(attempt, exc)
                    logger.debug("%s %s failed (%s); retrying in %.2fs", method, url, exc, delay)
                else:
                    delay = self._retry_delay(attempt, response)
                    if delay is None:
                        return response
                    logger.debug("%s %s returned %d; retrying in %.2fs", method, url, response.status_code, delay)
                time.sleep(delay)
                attempt += 1


class AsyncHTTPClient(_ClientBase):
    """Async client over ``httpx.AsyncClient``."""

    async def request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        url = self._url(path)
        attempt = 0
        async with httpx.AsyncClient(**self._client_options()) as client:
            while True:
                try:
                    response = await client.request(method, url, json=json)
                except httpx.HTTPError as exc:
                    delay = self._error_delay(attempt, exc)
                    logger.debug("%s %s failed (%s); retrying in %.2fs", method, url, exc, delay)
                else:
                    delay = self._retry_delay(attempt, response)
                    if delay is None:
                        return response
                    logger.debug("%s %s returned %d; retrying in %.2fs", method, url, response.status_code, delay)
                await asyncio.sleep(delay)
                attempt += 1
