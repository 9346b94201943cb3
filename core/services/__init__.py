# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .subscriber_store import SubscriberStore
from .subscription_writer import SubscriptionWriter, WriterNotRunningError

__all__ = [
    "SubscriberStore",
    "SubscriptionWriter",
    "WriterNotRunningError",
]
