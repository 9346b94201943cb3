# =============================================================================
# core/models/subscriber.py - Subscriber Schemas
# =============================================================================
# These models define the subscription contract:
# - SubscribeRequest: Input accepted by POST /subscribe (normalized)
# - Subscriber: One persisted record in the subscriber store
#
# The persisted field for the subscription time is "date", which is the
# alias of Subscriber.subscribed_at. Store files written by earlier versions
# of the server use the same shape.
# =============================================================================

import re
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from core.exceptions import InvalidEmailError, MalformedRequestError

# local-part@domain, where the domain has at least one dot
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL_MESSAGE = "Valid email is required."


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(value: str) -> str:
    """
    Normalize an email for storage and comparison.

    Example:
        normalize_email("  A@Example.com ")  # "a@example.com"
    """
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    """Check an already-normalized email against the permissive pattern."""
    return bool(value) and EMAIL_PATTERN.match(value) is not None


def _coerce_text(value: Any) -> str:
    # Scalars are stringified, containers are rejected
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError("must be a string")


# =============================================================================
# Request Model
# =============================================================================

class SubscribeRequest(BaseModel):
    """
    Schema for a subscription request body.

    Both fields are normalized on construction, so a valid instance always
    holds a lowercase email and a trimmed name.

    Example:
        {
            "email": "ann@example.com",
            "name": "Ann"
        }
    """

    email: str = Field(
        ...,
        description="Subscriber email (trimmed and lowercased)"
    )

    name: str = Field(
        default="",
        max_length=200,
        description="Optional display name (trimmed, may be empty)"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"email": "ann@example.com", "name": "Ann"},
                {"email": "bob@example.org"},
            ]
        }
    }

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------

    @field_validator("email", "name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        """Accept scalars the way a form would send them."""
        return _coerce_text(v)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Normalize and check the email shape."""
        email = normalize_email(v)
        if not is_valid_email(email):
            raise ValueError(INVALID_EMAIL_MESSAGE)
        return email

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_payload(cls, payload: Any) -> "SubscribeRequest":
        """
        Build a request from decoded JSON.

        Args:
            payload: Whatever json.loads returned for the request body

        Returns:
            A normalized SubscribeRequest

        Raises:
            MalformedRequestError: If the payload is not a JSON object or
                the name is not a scalar
            InvalidEmailError: If the email is missing or malformed
        """
        if not isinstance(payload, dict):
            raise MalformedRequestError()

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            failed_fields = {err["loc"][0] for err in e.errors() if err.get("loc")}
            if "email" in failed_fields:
                raise InvalidEmailError() from e
            fields = ", ".join(sorted(str(f) for f in failed_fields))
            raise MalformedRequestError(f"Invalid subscription fields: {fields}") from e

    def to_subscriber(self, subscribed_at: datetime | None = None) -> "Subscriber":
        """Create the record to persist, stamped with the server time."""
        return Subscriber(
            email=self.email,
            name=self.name,
            subscribed_at=subscribed_at or utc_now(),
        )


# =============================================================================
# Persisted Record
# =============================================================================

class Subscriber(BaseModel):
    """
    One record in the subscriber store.

    Serialized as {"email", "name", "date"}; "date" is an ISO-8601 UTC
    timestamp assigned by the server at write time.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=3)
    name: str = Field(default="")
    subscribed_at: datetime = Field(default_factory=utc_now, alias="date")

    @field_validator("email")
    @classmethod
    def require_at_sign(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("email must contain '@'")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def default_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("subscribed_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @field_serializer("subscribed_at")
    def serialize_subscribed_at(self, v: datetime) -> str:
        return v.isoformat().replace("+00:00", "Z")

    @property
    def key(self) -> str:
        """Case-insensitive identity used for duplicate detection."""
        return normalize_email(self.email)

    def to_record(self) -> dict[str, str]:
        """Convert to the dict written to the store file."""
        return self.model_dump(by_alias=True)
