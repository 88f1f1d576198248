"""Shared pieces of the SendGrid HTTP collaborator.

- ApiKeyAuth: the bearer header SendGrid expects
- RequestPolicy: timeouts, retryable statuses and backoff
- ConnectorError and subclasses: raised by HTTPClient, folded into Failure
  by SendGridClient
- RecipientsTransport: what the recipients service calls
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Protocol, runtime_checkable

from contactdb.recipients.models import HttpOutcome


@dataclass
class ApiKeyAuth:
    """SendGrid API key, sent as ``Authorization: Bearer <key>``."""

    api_key: str = ""

    def get_headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    def __repr__(self) -> str:
        masked = f"{self.api_key[:4]}..." if self.api_key else ""
        return f"ApiKeyAuth(api_key={masked!r})"


@dataclass
class RequestPolicy:
    """How HTTPClient talks to SendGrid.

    A request is attempted ``max_retries + 1`` times at most. Retries happen
    on transport errors and on ``retry_on_status``; the wait is
    ``retry_delay * retry_backoff ** attempt`` unless the response carried a
    Retry-After header.
    """

    connect_timeout: float = 10.0
    read_timeout: float = 30.0
    pool_timeout: float = 60.0

    max_retries: int = 3
    retry_delay: float = 1.0
    retry_backoff: float = 2.0
    retry_on_status: FrozenSet[int] = frozenset({429, 500, 502, 503, 504})

    user_agent: str = "contactdb/0.1"
    default_headers: Dict[str, str] = field(default_factory=lambda: {"Accept": "application/json"})


# Single attempt, used by tests and callers that retry on their own
NO_RETRY_POLICY = RequestPolicy(max_retries=0, retry_delay=0.0)


class ConnectorError(Exception):
    """The request never produced an HTTP response."""


class ConnectionError(ConnectorError):
    """SendGrid could not be reached."""


class TimeoutError(ConnectorError):
    """SendGrid did not answer in time."""


@runtime_checkable
class RecipientsTransport(Protocol):
    """What the recipients service needs from an HTTP collaborator.

    Every method returns an HttpOutcome and never raises for vendor responses.
    """

    def post(self, path: str, body: Any) -> HttpOutcome:
        ...

    def patch(self, path: str, body: Any) -> HttpOutcome:
        ...

    def get(self, path: str) -> HttpOutcome:
        ...
