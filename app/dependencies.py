# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# The store and writer are created by the app lifespan and kept on
# app.state, so every request sees the same single writer.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from core.services import SubscriberStore, SubscriptionWriter


def get_subscriber_store(request: Request) -> SubscriberStore:
    """
    Get the subscriber store instance.

    Returns the store created at startup.
    """
    return request.app.state.subscriber_store


def get_subscription_writer(request: Request) -> SubscriptionWriter:
    """
    Get the subscription writer instance.

    Returns the writer started at startup.
    """
    return request.app.state.subscription_writer


# Type aliases for dependency injection
StoreDep = Annotated[SubscriberStore, Depends(get_subscriber_store)]
WriterDep = Annotated[SubscriptionWriter, Depends(get_subscription_writer)]
