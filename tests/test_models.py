# =============================================================================
# tests/test_models.py - Subscriber Model Tests
# =============================================================================
# Unit tests for the subscription models to ensure:
# - Emails and names are normalized on input
# - Malformed emails and bodies raise the right 400-class errors
# - Stored records serialize with the "date" field in ISO-8601 UTC
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from core.exceptions import InvalidEmailError, MalformedRequestError
from core.models import SubscribeRequest, Subscriber, is_valid_email, normalize_email


# =============================================================================
# Email Helpers
# =============================================================================

class TestEmailHelpers:
    """Tests for normalize_email and is_valid_email."""

    def test_normalize_trims_and_lowercases(self):
        assert normalize_email("  A@Example.COM\n") == "a@example.com"

    @pytest.mark.parametrize("email", [
        "a@example.com",
        "first.last+tag@sub.example.co.uk",
        "x@y.z",
    ])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", [
        "",
        "not-an-email",
        "@example.com",
        "a@",
        "a@example",
        "a@@example.com",
        "a b@example.com",
        "a@example.",
    ])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)


# =============================================================================
# SubscribeRequest Tests
# =============================================================================

class TestSubscribeRequest:
    """Tests for SubscribeRequest."""

    def test_normalizes_email_and_name(self):
        """Test that email is lowercased and both fields are trimmed."""
        request = SubscribeRequest.from_payload({"email": " A@Example.com ", "name": "  Ann  "})

        assert request.email == "a@example.com"
        assert request.name == "Ann"

    def test_name_defaults_to_empty(self):
        request = SubscribeRequest.from_payload({"email": "bob@example.org"})
        assert request.name == ""

    def test_null_name_becomes_empty(self):
        request = SubscribeRequest.from_payload({"email": "bob@example.org", "name": None})
        assert request.name == ""

    def test_numeric_name_is_stringified(self):
        request = SubscribeRequest.from_payload({"email": "bob@example.org", "name": 42})
        assert request.name == "42"

    def test_extra_fields_are_ignored(self):
        request = SubscribeRequest.from_payload({"email": "bob@example.org", "plan": "pro"})
        assert request.email == "bob@example.org"

    def test_missing_email_is_invalid(self):
        with pytest.raises(InvalidEmailError) as exc_info:
            SubscribeRequest.from_payload({})

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Valid email is required."

    @pytest.mark.parametrize("payload", [{"name": "Ann"}, {"email": None}, {"email": None, "name": "Ann"}])
    def test_absent_or_null_email_is_invalid(self, payload):
        """Test that a missing email is rejected here, not when the record is built."""
        with pytest.raises(InvalidEmailError):
            SubscribeRequest.from_payload(payload)

    def test_blank_email_is_invalid(self):
        with pytest.raises(InvalidEmailError):
            SubscribeRequest.from_payload({"email": "   "})

    def test_malformed_email_is_invalid(self):
        with pytest.raises(InvalidEmailError):
            SubscribeRequest.from_payload({"email": "not-an-email"})

    def test_email_object_is_invalid(self):
        with pytest.raises(InvalidEmailError):
            SubscribeRequest.from_payload({"email": {"address": "a@example.com"}})

    def test_name_list_is_malformed(self):
        with pytest.raises(MalformedRequestError) as exc_info:
            SubscribeRequest.from_payload({"email": "a@example.com", "name": ["Ann"]})

        assert exc_info.value.status_code == 400
        assert "name" in exc_info.value.message

    @pytest.mark.parametrize("payload", [[], "a@example.com", 7, None, True])
    def test_non_object_payload_is_malformed(self, payload):
        with pytest.raises(MalformedRequestError):
            SubscribeRequest.from_payload(payload)

    def test_to_subscriber_stamps_current_time(self):
        before = datetime.now(timezone.utc)
        record = SubscribeRequest.from_payload({"email": "a@example.com", "name": "Ann"}).to_subscriber()

        assert record.email == "a@example.com"
        assert record.name == "Ann"
        assert record.subscribed_at >= before
        assert record.subscribed_at.tzinfo is not None


# =============================================================================
# Subscriber Tests
# =============================================================================

class TestSubscriber:
    """Tests for the persisted Subscriber record."""

    def test_to_record_uses_date_field(self):
        """Test that subscribed_at is written as an ISO-8601 'date'."""
        record = Subscriber(
            email="a@example.com",
            name="Ann",
            subscribed_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        )

        assert record.to_record() == {
            "email": "a@example.com",
            "name": "Ann",
            "date": "2024-01-15T10:30:00Z",
        }

    def test_parses_legacy_record(self):
        """Test records written by the JavaScript server (millisecond Z timestamps)."""
        record = Subscriber.model_validate({
            "email": "Bob@Example.com",
            "name": "Bob",
            "date": "2024-01-15T10:30:00.123Z",
        })

        assert record.email == "Bob@Example.com"
        assert record.key == "bob@example.com"
        assert record.subscribed_at == datetime(2024, 1, 15, 10, 30, 0, 123000, tzinfo=timezone.utc)

    def test_missing_or_null_name_defaults_to_empty(self):
        record = Subscriber.model_validate({"email": "a@example.com", "name": None, "date": "2024-01-15T10:30:00Z"})
        assert record.name == ""

    def test_naive_timestamp_is_utc(self):
        record = Subscriber(email="a@example.com", subscribed_at=datetime(2024, 1, 15, 10, 30))
        assert record.subscribed_at.tzinfo == timezone.utc

    def test_offset_timestamp_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        record = Subscriber(email="a@example.com", subscribed_at=datetime(2024, 1, 15, 12, 30, tzinfo=plus_two))

        assert record.to_record()["date"] == "2024-01-15T10:30:00Z"

    def test_record_requires_at_sign(self):
        with pytest.raises(ValidationError):
            Subscriber.model_validate({"email": "nobody", "date": "2024-01-15T10:30:00Z"})

    def test_record_round_trips(self):
        record = SubscribeRequest.from_payload({"email": "a@example.com", "name": "Ann"}).to_subscriber()
        assert Subscriber.model_validate(record.to_record()) == record
