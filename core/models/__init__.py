# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - subscriber.py: Subscription request and persisted subscriber record
#
# These models define the "contract" between API, clients and the store file.
# =============================================================================

from .subscriber import (
    EMAIL_PATTERN,
    SubscribeRequest,
    Subscriber,
    is_valid_email,
    normalize_email,
    utc_now,
)

__all__ = [
    "EMAIL_PATTERN",
    "SubscribeRequest",
    "Subscriber",
    "is_valid_email",
    "normalize_email",
    "utc_now",
]
