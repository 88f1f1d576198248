"""Tests for contactdb response classification.

Tests cover:
- Persisted table (add / add_multiple), rule by rule
- Search table
- Bodies matching several shapes at once (rule priority)
- Diagnostic hook invocation on the unexpected path
- Purity (same outcome -> same result)
"""

import logging

import pytest

from contactdb.recipients import (
    NO_CHANGES_APPLIED,
    UNEXPECTED_ERROR,
    Err,
    Failure,
    Ok,
    OkKind,
    Success,
    classify_persisted,
    classify_search,
)

# =============================================================================
# Persisted table
# =============================================================================


class TestClassifyPersisted:
    """Tests for the add / add_multiple decision table."""

    def test_single_persisted_id(self, recorder):
        """One persisted recipient yields its id."""
        result = classify_persisted(Success(body={"persisted_recipients": ["abc123"]}), recorder)
        assert result == Ok(kind=OkKind.RECIPIENT_ID, value="abc123")
        assert result.is_ok is True
        assert recorder.outcomes == []

    def test_many_persisted_ids(self, recorder):
        """More than one persisted recipient yields the id list."""
        result = classify_persisted(
            Success(body={"persisted_recipients": ["a", "b", "c"]}), recorder
        )
        assert result.kind == OkKind.RECIPIENT_IDS
        assert result.value == ["a", "b", "c"]

    def test_empty_persisted_is_no_op(self, recorder):
        """An empty persisted list means nothing changed."""
        result = classify_persisted(Success(body={"persisted_recipients": []}), recorder)
        assert result == Err(messages=[NO_CHANGES_APPLIED])
        assert recorder.outcomes == []

    def test_vendor_errors_in_order(self, recorder):
        """error_count > 0 yields every message, order preserved."""
        body = {
            "error_count": 2,
            "errors": [{"message": "bad email"}, {"message": "dup"}],
        }
        result = classify_persisted(Success(body=body), recorder)
        assert result == Err(messages=["bad email", "dup"])
        assert result.is_ok is False

    def test_vendor_errors_keep_extra_fields_out(self, recorder):
        """Only the message field of each error is surfaced."""
        body = {
            "error_count": 1,
            "errors": [{"message": "invalid email", "error_indices": [0]}],
        }
        assert classify_persisted(Success(body=body), recorder).messages == ["invalid email"]

    def test_zero_error_count_is_ignored(self, recorder):
        """error_count == 0 does not produce an error."""
        body = {"error_count": 0, "errors": [], "persisted_recipients": ["id1"]}
        assert classify_persisted(Success(body=body), recorder) == Ok.recipient_id("id1")

    def test_transport_failure(self, recorder):
        """A transport failure is an unexpected error and is logged once."""
        outcome = Failure(reason="ConnectionError: refused")
        result = classify_persisted(outcome, recorder)
        assert result == Err(messages=[UNEXPECTED_ERROR])
        assert recorder.outcomes == [outcome]

    def test_empty_body(self, recorder):
        """An empty body is an unexpected error and is logged once."""
        outcome = Success(body={})
        assert classify_persisted(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert recorder.outcomes == [outcome]

    @pytest.mark.parametrize(
        "body",
        [
            None,
            [],
            "persisted_recipients",
            {"persisted_recipients": "abc"},
            {"persisted_recipients": [1, 2]},
            {"error_count": True, "errors": [{"message": "x"}]},
            {"error_count": "2", "errors": [{"message": "x"}]},
            {"error_count": 1, "errors": [{"code": 400}]},
        ],
    )
    def test_unrecognised_shapes(self, recorder, body):
        """Bodies matching no rule fall through to the generic error."""
        assert classify_persisted(Success(body=body), recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert len(recorder.outcomes) == 1


class TestPersistedPriority:
    """Bodies that satisfy more than one rule resolve in table order."""

    def test_many_persisted_beats_errors(self, recorder):
        """Partial success with several ids is still Ok."""
        body = {
            "persisted_recipients": ["a", "b"],
            "error_count": 1,
            "errors": [{"message": "invalid email"}],
        }
        assert classify_persisted(Success(body=body), recorder) == Ok.recipient_ids(["a", "b"])

    def test_errors_beat_single_persisted(self, recorder):
        """One id alongside errors surfaces the errors."""
        body = {
            "persisted_recipients": ["a"],
            "error_count": 1,
            "errors": [{"message": "invalid email"}],
        }
        assert classify_persisted(Success(body=body), recorder) == Err(messages=["invalid email"])

    def test_errors_beat_empty_persisted(self, recorder):
        """An error block wins over the no-op shape."""
        body = {
            "persisted_recipients": [],
            "error_count": 1,
            "errors": [{"message": "dup"}],
        }
        assert classify_persisted(Success(body=body), recorder) == Err(messages=["dup"])

    @pytest.mark.parametrize(
        "body",
        [
            {"persisted_recipients": ["a"], "error_count": 1},
            {"persisted_recipients": ["a"], "error_count": 1, "errors": []},
            {"persisted_recipients": [], "error_count": 1, "errors": [{"message": None}]},
            {"error_count": 2, "errors": [{"message": "dup"}, {"code": 400}]},
        ],
    )
    def test_error_count_without_usable_messages_is_unexpected(self, recorder, body):
        """A reported error never turns into Ok or the no-op result."""
        outcome = Success(body=body)
        assert classify_persisted(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert recorder.outcomes == [outcome]

    def test_many_persisted_beats_malformed_errors(self, recorder):
        """Several ids still win over an error block, usable or not."""
        body = {"persisted_recipients": ["a", "b"], "error_count": 1}
        assert classify_persisted(Success(body=body), recorder) == Ok.recipient_ids(["a", "b"])
        assert recorder.outcomes == []

    def test_non_2xx_json_body_is_classified(self, recorder):
        """Status code does not matter once the body decoded."""
        body = {"error_count": 1, "errors": [{"message": "email is invalid"}]}
        result = classify_persisted(Success(body=body, status_code=400), recorder)
        assert result == Err(messages=["email is invalid"])


# =============================================================================
# Search table
# =============================================================================


class TestClassifySearch:
    """Tests for the search decision table."""

    def test_recipients(self, recorder):
        """A recipients list is returned as-is."""
        body = {"recipients": [{"email": "x@y.com"}]}
        result = classify_search(Success(body=body), recorder)
        assert result == Ok(kind=OkKind.RECIPIENTS, value=[{"email": "x@y.com"}])

    def test_empty_recipients(self, recorder):
        """No matches is still a successful search."""
        assert classify_search(Success(body={"recipients": []}), recorder) == Ok.recipients([])
        assert recorder.outcomes == []

    def test_errors_beat_recipients(self, recorder):
        """An error block wins even when an empty recipients list is present."""
        body = {
            "recipients": [],
            "error_count": 1,
            "errors": [{"message": "invalid field"}],
        }
        assert classify_search(Success(body=body), recorder) == Err(messages=["invalid field"])

    def test_error_count_without_messages_beats_recipients(self, recorder):
        """error_count > 0 with no error list is unexpected, not an empty result."""
        outcome = Success(body={"error_count": 2, "recipients": []})
        assert classify_search(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert recorder.outcomes == [outcome]

    def test_transport_failure(self, recorder):
        """A failed search is an unexpected error, logged once."""
        outcome = Failure(reason="TimeoutError: Request timed out")
        assert classify_search(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert recorder.outcomes == [outcome]

    def test_persisted_shape_is_unexpected_for_search(self, recorder):
        """Search does not accept the persisted shape."""
        outcome = Success(body={"persisted_recipients": ["a"]})
        assert classify_search(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])
        assert len(recorder.outcomes) == 1

    def test_recipients_must_be_mappings(self, recorder):
        """A recipients list of scalars is not a recognised shape."""
        outcome = Success(body={"recipients": ["x@y.com"]})
        assert classify_search(outcome, recorder) == Err(messages=[UNEXPECTED_ERROR])


# =============================================================================
# Side channel and purity
# =============================================================================


class TestDiagnostics:
    """Tests for the diagnostic logging hook."""

    def test_default_hook_logs_warning(self, caplog):
        """Without an injected hook a single WARNING carries the raw outcome."""
        outcome = Success(body={"unexpected": "shape"}, status_code=502)
        with caplog.at_level(logging.WARNING, logger="contactdb.recipients.classifier"):
            result = classify_persisted(outcome)

        assert result == Err(messages=[UNEXPECTED_ERROR])
        records = [r for r in caplog.records if r.name == "contactdb.recipients.classifier"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert "unexpected" in records[0].getMessage()
        assert "502" in records[0].getMessage()

    def test_hook_not_called_on_known_shapes(self, recorder):
        """Recognised shapes, errors included, never hit the hook."""
        classify_persisted(Success(body={"persisted_recipients": ["a"]}), recorder)
        classify_persisted(Success(body={"persisted_recipients": []}), recorder)
        classify_search(Success(body={"recipients": []}), recorder)
        assert recorder.outcomes == []


class TestPurity:
    """Classifying the same outcome twice gives the same result."""

    @pytest.mark.parametrize(
        "outcome",
        [
            Success(body={"persisted_recipients": ["abc123"]}),
            Success(body={"persisted_recipients": ["a", "b"]}),
            Success(body={"error_count": 1, "errors": [{"message": "dup"}]}),
            Success(body={}),
            Failure(reason="down"),
        ],
    )
    def test_idempotent(self, outcome, recorder):
        assert classify_persisted(outcome, recorder) == classify_persisted(outcome, recorder)

    def test_does_not_mutate_body(self, recorder):
        body = {"recipients": [{"email": "x@y.com"}]}
        result = classify_search(Success(body=body), recorder)
        result.value[0]["email"] = "changed@y.com"
        assert body == {"recipients": [{"email": "x@y.com"}]}
