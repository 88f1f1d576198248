"""Contact submission against SendGrid's contactdb recipients endpoints.

    recipients = Recipients(SendGridClient.from_config())

    result = recipients.add("test@example.com", {"first_name": "John"})
    if result.is_ok:
        recipient_id = result.value
    else:
        print(result.messages)

Every vendor response comes back as an Ok/Err value. Only misuse of the API
(wrong argument types, an empty address) raises.
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, List, Optional
from urllib.parse import urlencode

from contactdb.recipients.classifier import (
    UnexpectedLogger,
    classify_persisted,
    classify_search,
    log_unexpected_outcome,
)
from contactdb.recipients.models import ClassifiedResult, ContactPayload, build_contact_payload

if TYPE_CHECKING:
    from contactdb.connectors.base import RecipientsTransport
    from contactdb.connectors.sendgrid import AsyncSendGridClient

BASE_API_PATH = "/v3/contactdb/recipients"
SEARCH_API_PATH = f"{BASE_API_PATH}/search"


def _check_email(email_address: Any) -> None:
    if not isinstance(email_address, str):
        raise TypeError(f"email_address must be a str, got {type(email_address).__name__}")
    if not email_address:
        raise ValueError("email_address must not be empty")


def _check_mapping(value: Any, name: str) -> None:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a mapping, got {type(value).__name__}")


def _check_recipients(recipients: Any) -> List[ContactPayload]:
    # str and dict are iterable but never a list of recipients
    if isinstance(recipients, (str, bytes, Mapping)) or not isinstance(recipients, Sequence):
        raise TypeError(
            f"recipients must be a sequence of mappings, got {type(recipients).__name__}"
        )
    for index, recipient in enumerate(recipients):
        _check_mapping(recipient, f"recipients[{index}]")
    return [dict(recipient) for recipient in recipients]


def search_path(query_options: Mapping[str, Any]) -> str:
    """Search URL path with the options percent-encoded in input order."""
    return f"{SEARCH_API_PATH}?{urlencode(list(query_options.items()))}"


class Recipients:
    """Add, upsert and search contactdb recipients.

    Stateless: safe to share between threads as long as the transport is.
    """

    def __init__(
        self,
        client: "RecipientsTransport",
        log_unexpected: Optional[UnexpectedLogger] = None,
    ):
        """Initialize the service.

        Args:
            client: HTTP collaborator returning HttpOutcome values
            log_unexpected: Diagnostic hook for "Unexpected error" results
        """
        self.client = client
        self.log_unexpected = log_unexpected or log_unexpected_outcome

    def add(
        self, email_address: str, custom_fields: Optional[Mapping[str, Any]] = None
    ) -> ClassifiedResult:
        """Add one recipient.

        Custom fields must already exist in the SendGrid account. An ``email``
        key in ``custom_fields`` replaces ``email_address``.

        Returns:
            Ok(RECIPIENT_ID) with the new id, or Err with vendor messages
        """
        _check_email(email_address)
        if custom_fields is not None:
            _check_mapping(custom_fields, "custom_fields")

        payload = [build_contact_payload(email_address, custom_fields)]
        outcome = self.client.post(BASE_API_PATH, payload)
        return classify_persisted(outcome, self.log_unexpected)

    def add_multiple(self, recipients: Sequence[Mapping[str, Any]]) -> ClassifiedResult:
        """Add or update many recipients in one PATCH.

        Returns:
            Ok(RECIPIENT_IDS) for more than one persisted id, Ok(RECIPIENT_ID)
            for exactly one, or Err
        """
        payload = _check_recipients(recipients)
        outcome = self.client.patch(BASE_API_PATH, payload)
        return classify_persisted(outcome, self.log_unexpected)

    def search(self, query_options: Mapping[str, Any]) -> ClassifiedResult:
        """Search recipients by field value, e.g. ``{"last_name": "Lee"}``."""
        _check_mapping(query_options, "query_options")
        outcome = self.client.get(search_path(query_options))
        return classify_search(outcome, self.log_unexpected)


class AsyncRecipients:
    """Async variant of Recipients over an AsyncSendGridClient."""

    def __init__(
        self,
        client: "AsyncSendGridClient",
        log_unexpected: Optional[UnexpectedLogger] = None,
    ):
        self.client = client
        self.log_unexpected = log_unexpected or log_unexpected_outcome

    async def add(
        self, email_address: str, custom_fields: Optional[Mapping[str, Any]] = None
    ) -> ClassifiedResult:
        _check_email(email_address)
        if custom_fields is not None:
            _check_mapping(custom_fields, "custom_fields")

        payload = [build_contact_payload(email_address, custom_fields)]
        outcome = await self.client.post(BASE_API_PATH, payload)
        return classify_persisted(outcome, self.log_unexpected)

    async def add_multiple(self, recipients: Sequence[Mapping[str, Any]]) -> ClassifiedResult:
        payload = _check_recipients(recipients)
        outcome = await self.client.patch(BASE_API_PATH, payload)
        return classify_persisted(outcome, self.log_unexpected)

    async def search(self, query_options: Mapping[str, Any]) -> ClassifiedResult:
        _check_mapping(query_options, "query_options")
        outcome = await self.client.get(search_path(query_options))
        return classify_search(outcome, self.log_unexpected)

