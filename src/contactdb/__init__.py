"""contactdb: client for SendGrid's Marketing Campaigns contact database."""

from contactdb.connectors import AsyncSendGridClient, SendGridClient
from contactdb.recipients import (
    AsyncRecipients,
    Err,
    Failure,
    Ok,
    OkKind,
    Recipients,
    Success,
)

__version__ = "0.1.0"

__all__ = [
    "Recipients",
    "AsyncRecipients",
    "SendGridClient",
    "AsyncSendGridClient",
    "Ok",
    "OkKind",
    "Err",
    "Success",
    "Failure",
]
