"""Test configuration and fixtures."""

from typing import Any, Callable, List

import httpx
import pytest

from contactdb.connectors import NO_RETRY_POLICY, DummyHTTPClient, HTTPClient, SendGridClient
from contactdb.recipients import Recipients


class OutcomeRecorder:
    """Stand-in for the diagnostic hook; records every outcome it receives."""

    def __init__(self):
        self.outcomes: List[Any] = []

    def __call__(self, outcome: Any) -> None:
        self.outcomes.append(outcome)


@pytest.fixture
def recorder() -> OutcomeRecorder:
    return OutcomeRecorder()


@pytest.fixture
def dummy_client() -> DummyHTTPClient:
    return DummyHTTPClient()


@pytest.fixture
def recipients(dummy_client, recorder) -> Recipients:
    """Recipients service over a DummyHTTPClient with a recording hook."""
    return Recipients(dummy_client, log_unexpected=recorder)


@pytest.fixture
def make_sendgrid() -> Callable[[Callable[[httpx.Request], httpx.Response]], SendGridClient]:
    """Build a SendGridClient whose transport is the given handler."""

    def _make(handler, policy=NO_RETRY_POLICY) -> SendGridClient:
        http = HTTPClient(
            policy=policy,
            base_url="https://api.sendgrid.test",
            transport=httpx.MockTransport(handler),
        )
        return SendGridClient(http)

    return _make
