"""SendGrid contactdb recipients: add, bulk upsert and search.

This module provides:
- Value types for HTTP outcomes and classified results (Ok / Err)
- The response classifier (ordered decision tables)
- Recipients / AsyncRecipients services
"""

from contactdb.recipients.classifier import (
    NO_CHANGES_APPLIED,
    PERSISTED_RULES,
    SEARCH_RULES,
    UNEXPECTED_ERROR,
    Rule,
    classify,
    classify_persisted,
    classify_search,
    log_unexpected_outcome,
)
from contactdb.recipients.models import (
    ClassifiedResult,
    ContactPayload,
    Err,
    Failure,
    HttpOutcome,
    Ok,
    OkKind,
    Success,
    build_contact_payload,
)
from contactdb.recipients.service import (
    BASE_API_PATH,
    SEARCH_API_PATH,
    AsyncRecipients,
    Recipients,
    search_path,
)

__all__ = [
    "ContactPayload",
    "build_contact_payload",
    "HttpOutcome",
    "Success",
    "Failure",
    "ClassifiedResult",
    "Ok",
    "OkKind",
    "Err",
    "Rule",
    "PERSISTED_RULES",
    "SEARCH_RULES",
    "UNEXPECTED_ERROR",
    "NO_CHANGES_APPLIED",
    "classify",
    "classify_persisted",
    "classify_search",
    "log_unexpected_outcome",
    "BASE_API_PATH",
    "SEARCH_API_PATH",
    "Recipients",
    "AsyncRecipients",
    "search_path",
]
