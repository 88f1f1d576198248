"""Response classification for the contactdb recipients endpoints.

The vendor answers create/upsert/search calls with loosely structured JSON
that can satisfy more than one shape at once (e.g. some recipients
persisted while others produced errors). Classification is therefore an
ordered decision table: each rule is a (name, predicate, build) triple and
the first rule whose predicate matches produces the result.

Persisted table (add / add_multiple):
    transport_failure -> many_persisted -> vendor_errors
    -> one_persisted -> none_persisted -> unexpected

Search table:
    vendor_errors -> recipients -> unexpected

A rule whose shape matched but cannot be built (a reported error count with
no usable messages) also yields "Unexpected error".

Functions here are pure apart from the injected ``log_unexpected`` callable,
which is invoked exactly once whenever the generic "Unexpected error"
result is produced.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from contactdb.recipients.models import (
    ClassifiedResult,
    Err,
    Failure,
    HttpOutcome,
    Ok,
    Success,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "Unexpected error"
NO_CHANGES_APPLIED = "No changes applied for recipient"

UnexpectedLogger = Callable[[HttpOutcome], None]


def log_unexpected_outcome(outcome: HttpOutcome) -> None:
    """Default diagnostic side channel: one WARNING with the raw outcome."""
    logger.warning("Unexpected contactdb response: %r", outcome)


# =============================================================================
# Shape predicates
# =============================================================================


def _body(outcome: HttpOutcome) -> Optional[Mapping[str, Any]]:
    """Decoded body as a mapping, or None when there is nothing to inspect."""
    if isinstance(outcome, Success) and isinstance(outcome.body, Mapping):
        return outcome.body
    return None


def _persisted(outcome: HttpOutcome) -> Optional[List[str]]:
    body = _body(outcome)
    if body is None:
        return None
    ids = body.get("persisted_recipients")
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        return None
    return ids


def _error_count(outcome: HttpOutcome) -> bool:
    """True when the body reports at least one vendor error."""
    body = _body(outcome)
    if body is None:
        return False
    count = body.get("error_count")
    # bool is an int subclass; True is not a count
    return not isinstance(count, bool) and isinstance(count, int) and count > 0


def _error_messages(outcome: HttpOutcome) -> Optional[List[str]]:
    """One message per reported error, in order; None when any is unusable."""
    errors = _body(outcome).get("errors")
    if not isinstance(errors, list) or not errors:
        return None
    messages = []
    for error in errors:
        if not isinstance(error, Mapping) or not isinstance(error.get("message"), str):
            return None
        messages.append(error["message"])
    return messages


def _search_recipients(outcome: HttpOutcome) -> Optional[List[Mapping[str, Any]]]:
    body = _body(outcome)
    if body is None:
        return None
    recipients = body.get("recipients")
    if not isinstance(recipients, list) or not all(isinstance(r, Mapping) for r in recipients):
        return None
    return recipients


# =============================================================================
# Decision tables
# =============================================================================


@dataclass(frozen=True)
class Rule:
    """One row of a decision table.

    ``build`` returns None when the matched shape cannot be turned into a
    result; ``classify`` then reports it as unexpected.
    """

    name: str
    matches: Callable[[HttpOutcome], bool]
    build: Callable[[HttpOutcome], Optional[ClassifiedResult]]


def _unexpected(outcome: HttpOutcome) -> Optional[ClassifiedResult]:
    return None


def _vendor_errors(outcome: HttpOutcome) -> Optional[ClassifiedResult]:
    messages = _error_messages(outcome)
    if messages is None:
        return None
    return Err(messages=messages)


PERSISTED_RULES: Sequence[Rule] = (
    Rule(
        "transport_failure",
        lambda o: isinstance(o, Failure),
        _unexpected,
    ),
    Rule(
        "many_persisted",
        lambda o: len(_persisted(o) or []) > 1,
        lambda o: Ok.recipient_ids(_persisted(o)),
    ),
    Rule("vendor_errors", _error_count, _vendor_errors),
    Rule(
        "one_persisted",
        lambda o: len(_persisted(o) or []) == 1,
        lambda o: Ok.recipient_id(_persisted(o)[0]),
    ),
    Rule(
        "none_persisted",
        lambda o: _persisted(o) == [],
        lambda o: Err(messages=[NO_CHANGES_APPLIED]),
    ),
)

SEARCH_RULES: Sequence[Rule] = (
    Rule("vendor_errors", _error_count, _vendor_errors),
    Rule(
        "recipients",
        lambda o: _search_recipients(o) is not None,
        lambda o: Ok.recipients([dict(r) for r in _search_recipients(o)]),
    ),
)


def classify(
    outcome: HttpOutcome,
    rules: Sequence[Rule],
    log_unexpected: UnexpectedLogger = log_unexpected_outcome,
) -> ClassifiedResult:
    """Run ``outcome`` through ``rules``; fall back to "Unexpected error"."""
    result = None
    for rule in rules:
        if rule.matches(outcome):
            logger.debug("contactdb response matched rule %s", rule.name)
            result = rule.build(outcome)
            break

    if result is None:
        log_unexpected(outcome)
        return Err(messages=[UNEXPECTED_ERROR])
    return result


def classify_persisted(
    outcome: HttpOutcome, log_unexpected: UnexpectedLogger = log_unexpected_outcome
) -> ClassifiedResult:
    """Classify the outcome of an add or add_multiple call."""
    return classify(outcome, PERSISTED_RULES, log_unexpected)


def classify_search(
    outcome: HttpOutcome, log_unexpected: UnexpectedLogger = log_unexpected_outcome
) -> ClassifiedResult:
    """Classify the outcome of a search call."""
    return classify(outcome, SEARCH_RULES, log_unexpected)
