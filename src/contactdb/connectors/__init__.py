"""HTTP collaborator layer for the SendGrid contactdb API.

Key components:
- ApiKeyAuth / RequestPolicy: credentials, timeouts and retries
- ConnectorError hierarchy: transport failures
- HTTPClient / AsyncHTTPClient: httpx wrapper with policy enforcement
- SendGridClient / AsyncSendGridClient: post/patch/get returning HttpOutcome
- DummyHTTPClient: Test collaborator without network calls
"""

from .base import (
    NO_RETRY_POLICY,
    ApiKeyAuth,
    ConnectionError,
    ConnectorError,
    RecipientsTransport,
    RequestPolicy,
    TimeoutError,
)
from .dummy import DummyHTTPClient, FailingHTTPClient
from .http_client import AsyncHTTPClient, HTTPClient, retry_after_seconds
from .sendgrid import AsyncSendGridClient, SendGridClient

__all__ = [
    # Protocol
    "RecipientsTransport",
    # Auth and policy
    "ApiKeyAuth",
    "RequestPolicy",
    "NO_RETRY_POLICY",
    # Errors
    "ConnectorError",
    "ConnectionError",
    "TimeoutError",
    # HTTP
    "HTTPClient",
    "AsyncHTTPClient",
    "retry_after_seconds",
    # SendGrid
    "SendGridClient",
    "AsyncSendGridClient",
    # Dummy
    "DummyHTTPClient",
    "FailingHTTPClient",
]
