"""Value types for the contactdb recipients endpoints.

All models are request-scoped and immutable:
- ContactPayload: the dict sent for a single recipient
- HttpOutcome: what the HTTP collaborator hands back (Success | Failure)
- ClassifiedResult: what callers get back (Ok | Err)
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# A recipient as sent to the vendor: always carries "email", plus any
# custom fields previously registered in the SendGrid account.
ContactPayload = Dict[str, Any]

# Reserved field name every payload must carry
EMAIL_FIELD = "email"


def build_contact_payload(
    email_address: str, custom_fields: Optional[Mapping[str, Any]] = None
) -> ContactPayload:
    """Merge custom fields into ``{"email": email_address}``.

    A custom ``email`` key overrides the primary address.
    """
    payload: ContactPayload = {EMAIL_FIELD: email_address}
    if custom_fields:
        payload.update(custom_fields)
    return payload


# =============================================================================
# HTTP outcome (collaborator -> classifier)
# =============================================================================


class Success(BaseModel):
    """A response whose body decoded as JSON, whatever its status code."""

    outcome: Literal["success"] = "success"
    body: Any = None
    status_code: int = 200

    model_config = ConfigDict(frozen=True)


class Failure(BaseModel):
    """No usable body: connection error, timeout, or undecodable response."""

    outcome: Literal["failure"] = "failure"
    reason: str
    status_code: Optional[int] = None
    raw_body: Optional[str] = None

    model_config = ConfigDict(frozen=True)


HttpOutcome = Annotated[Union[Success, Failure], Field(discriminator="outcome")]


# =============================================================================
# Classified result (classifier -> caller)
# =============================================================================


class OkKind(str, Enum):
    """Which success shape an Ok carries."""

    RECIPIENT_ID = "recipient_id"  # one persisted id
    RECIPIENT_IDS = "recipient_ids"  # bulk upsert ids
    RECIPIENTS = "recipients"  # search results


class Ok(BaseModel):
    """Successful call.

    ``value`` is a single id string, a list of id strings, or a list of
    recipient mappings depending on ``kind``.
    """

    status: Literal["ok"] = "ok"
    kind: OkKind
    value: Union[str, List[str], List[Dict[str, Any]]]

    model_config = ConfigDict(frozen=True)

    @classmethod
    def recipient_id(cls, recipient_id: str) -> "Ok":
        return cls(kind=OkKind.RECIPIENT_ID, value=recipient_id)

    @classmethod
    def recipient_ids(cls, recipient_ids: List[str]) -> "Ok":
        return cls(kind=OkKind.RECIPIENT_IDS, value=list(recipient_ids))

    @classmethod
    def recipients(cls, recipients: List[Dict[str, Any]]) -> "Ok":
        return cls(kind=OkKind.RECIPIENTS, value=list(recipients))

    @property
    def is_ok(self) -> bool:
        return True


class Err(BaseModel):
    """Failed call with one or more human-readable messages."""

    status: Literal["error"] = "error"
    messages: List[str] = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def is_ok(self) -> bool:
        return False


ClassifiedResult = Annotated[Union[Ok, Err], Field(discriminator="status")]
