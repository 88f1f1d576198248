"""SendGrid HTTP collaborator for the contactdb recipients service.

Turns HTTPClient responses into HttpOutcome values:
- Any response whose body decodes as JSON -> Success(body, status_code),
  including 4xx/5xx: SendGrid reports validation problems in the body
- Connection errors, timeouts, exhausted retries, undecodable bodies
  -> Failure(reason)

Nothing here raises for a vendor response; classification happens
downstream in contactdb.recipients.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from contactdb.config import Config, config
from contactdb.recipients.models import Failure, HttpOutcome, Success

from .base import ApiKeyAuth, ConnectorError, RequestPolicy
from .http_client import AsyncHTTPClient, HTTPClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.sendgrid.com"


def _settings_from_config(cfg: Config) -> Dict[str, Any]:
    """Arguments for ``create`` taken from SENDGRID_* configuration."""
    if not cfg.sendgrid.api_key:
        logger.warning("SENDGRID_API_KEY is not configured; requests will be rejected")
    return {
        "api_key": cfg.sendgrid.api_key,
        "base_url": cfg.sendgrid.base_url,
        "policy": RequestPolicy(read_timeout=cfg.sendgrid.timeout_s, max_retries=cfg.sendgrid.max_retries),
    }


def to_outcome(response: httpx.Response) -> HttpOutcome:
    """Decode a response into Success, or Failure when the body is not JSON."""
    try:
        body = response.json()
    except ValueError as e:
        logger.warning(
            "SendGrid returned an undecodable body (status=%s): %s",
            response.status_code,
            response.text[:800],
        )
        return Failure(
            reason=f"Undecodable response body: {e}",
            status_code=response.status_code,
            raw_body=response.text,
        )
    return Success(body=body, status_code=response.status_code)


def error_outcome(error: ConnectorError) -> HttpOutcome:
    logger.warning("SendGrid request failed: %s: %s", type(error).__name__, error)
    return Failure(reason=f"{type(error).__name__}: {error}")


class SendGridClient:
    """Synchronous collaborator: post/patch/get returning HttpOutcome."""

    name = "sendgrid"

    def __init__(self, http: HTTPClient):
        self.http = http

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        policy: Optional[RequestPolicy] = None,
        **http_kwargs: Any,
    ) -> "SendGridClient":
        """Build a client authenticated with a SendGrid API key."""
        http = HTTPClient(
            auth=ApiKeyAuth(api_key=api_key),
            policy=policy,
            base_url=base_url,
            **http_kwargs,
        )
        return cls(http)

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None, **http_kwargs: Any) -> "SendGridClient":
        """Build a client from environment configuration."""
        return cls.create(**_settings_from_config(cfg or config), **http_kwargs)

    def _send(self, method: str, path: str, body: Any = None) -> HttpOutcome:
        try:
            response = self.http.request(method, path, json=body)
        except ConnectorError as e:
            return error_outcome(e)
        return to_outcome(response)

    def post(self, path: str, body: Any) -> HttpOutcome:
        return self._send("POST", path, body)

    def patch(self, path: str, body: Any) -> HttpOutcome:
        return self._send("PATCH", path, body)

    def get(self, path: str) -> HttpOutcome:
        return self._send("GET", path)


class AsyncSendGridClient:
    """Async collaborator mirroring SendGridClient."""

    name = "sendgrid"

    def __init__(self, http: AsyncHTTPClient):
        self.http = http

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        policy: Optional[RequestPolicy] = None,
        **http_kwargs: Any,
    ) -> "AsyncSendGridClient":
        http = AsyncHTTPClient(
            auth=ApiKeyAuth(api_key=api_key),
            policy=policy,
            base_url=base_url,
            **http_kwargs,
        )
        return cls(http)

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None, **http_kwargs: Any) -> "AsyncSendGridClient":
        return cls.create(**_settings_from_config(cfg or config), **http_kwargs)

    async def _send(self, method: str, path: str, body: Any = None) -> HttpOutcome:
        try:
            response = await self.http.request(method, path, json=body)
        except ConnectorError as e:
            return error_outcome(e)
        return to_outcome(response)

    async def post(self, path: str, body: Any) -> HttpOutcome:
        return await self._send("POST", path, body)

    async def patch(self, path: str, body: Any) -> HttpOutcome:
        return await self._send("PATCH", path, body)

    async def get(self, path: str) -> HttpOutcome:
        return await self._send("GET", path)
