"""Dummy HTTP collaborators for testing.

These implement the RecipientsTransport protocol without making any real
network calls. Used for:
- Unit tests of the recipients service
- Development without a SendGrid account

DummyHTTPClient returns canned HttpOutcome values per HTTP method and records
every call so tests can assert on the exact path and payload sent.
"""

from typing import Any, Dict, List, Optional

from contactdb.recipients.models import Failure, HttpOutcome, Success


class DummyHTTPClient:
    """Dummy collaborator for testing.

    Returns canned outcomes without making real network calls.
    Can be configured to:
    - Return a specific outcome per method ("POST", "PATCH", "GET")
    - Track calls for assertions
    """

    name = "dummy"

    def __init__(self, default: Optional[HttpOutcome] = None):
        """Initialize dummy client.

        Args:
            default: Outcome for methods without a canned response
        """
        self._default = default or Success(body={})
        self._responses: Dict[str, HttpOutcome] = {}
        self._call_log: List[Dict[str, Any]] = []

    def set_response(self, method: str, outcome: HttpOutcome) -> None:
        """Set canned outcome for an HTTP method."""
        self._responses[method.upper()] = outcome

    def set_body(self, method: str, body: Any, status_code: int = 200) -> None:
        """Shortcut for set_response(method, Success(body=...))."""
        self.set_response(method, Success(body=body, status_code=status_code))

    def clear_responses(self) -> None:
        """Clear all canned responses."""
        self._responses.clear()

    def _log_call(self, method: str, path: str, body: Any) -> None:
        """Log a call for later assertions."""
        self._call_log.append({
            "method": method,
            "path": path,
            "body": body,
        })

    def get_call_log(self) -> List[Dict[str, Any]]:
        """Get log of all calls."""
        return self._call_log.copy()

    def clear_call_log(self) -> None:
        """Clear the call log."""
        self._call_log.clear()

    def was_called(self, method: str) -> bool:
        """Check if an HTTP method was called."""
        return any(call["method"] == method.upper() for call in self._call_log)

    def call_count(self, method: str) -> int:
        """Count how many times an HTTP method was called."""
        return sum(1 for call in self._call_log if call["method"] == method.upper())

    @property
    def last_call(self) -> Optional[Dict[str, Any]]:
        return self._call_log[-1] if self._call_log else None

    def _respond(self, method: str, path: str, body: Any = None) -> HttpOutcome:
        self._log_call(method, path, body)
        return self._responses.get(method, self._default)

    def post(self, path: str, body: Any) -> HttpOutcome:
        return self._respond("POST", path, body)

    def patch(self, path: str, body: Any) -> HttpOutcome:
        return self._respond("PATCH", path, body)

    def get(self, path: str) -> HttpOutcome:
        return self._respond("GET", path)


class FailingHTTPClient(DummyHTTPClient):
    """Collaborator whose every call is a transport failure.

    Useful for testing the "Unexpected error" path.
    """

    name = "failing"

    def __init__(self, reason: str = "Simulated connection failure"):
        super().__init__(default=Failure(reason=reason))
