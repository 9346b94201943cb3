# =============================================================================
# app/routers/subscribe.py - Newsletter Subscription Endpoint
# =============================================================================
# POST /subscribe: the only stateful endpoint of the landing page.
#
# Pipeline:
# 1. Read the body (streamed, capped at MAX_BODY_SIZE_BYTES)
# 2. Parse JSON and normalize email/name
# 3. Reject emails already in the store (409)
# 4. Hand the record to the single writer, which re-checks and persists
# =============================================================================

import json
import logging
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from app.config import settings
from app.dependencies import StoreDep, WriterDep
from app.exceptions import (
    DuplicateSubscriberError,
    MalformedRequestError,
    PayloadTooLargeError,
    StorageCorruptError,
)
from core.models.subscriber import SubscribeRequest

logger = logging.getLogger(__name__)

router = APIRouter()

SUCCESS_MESSAGE = "Subscription successful."


# =============================================================================
# Response Models
# =============================================================================

class SubscribeResponse(BaseModel):
    """Response when a subscription is stored."""
    message: str = Field(default=SUCCESS_MESSAGE, examples=[SUCCESS_MESSAGE])


class ErrorResponse(BaseModel):
    """Error body shared by every failure status."""
    error: str = Field(..., examples=["already subscribed"])
    code: str = Field(..., examples=["ALREADY_SUBSCRIBED"])
    suggestion: str | None = None


# =============================================================================
# Helper Functions
# =============================================================================

async def read_body(request: Request, max_bytes: int) -> bytes:
    """
    Accumulate the request body, refusing anything over max_bytes.

    A declared Content-Length over the cap is refused before reading.
    Otherwise chunks are read until the cap is crossed, then reading stops.
    """
    declared = request.headers.get("content-length")
    if declared is not None:
        try:
            declared_size = int(declared)
        except ValueError:
            raise MalformedRequestError("Invalid Content-Length header.")
        if declared_size > max_bytes:
            logger.warning(f"Refused body of {declared_size} bytes (max {max_bytes})")
            raise PayloadTooLargeError(max_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_bytes:
            logger.warning(f"Aborted body read after {len(body)} bytes (max {max_bytes})")
            raise PayloadTooLargeError(max_bytes)

    return bytes(body)


def parse_json_body(body: bytes) -> Any:
    """Decode a JSON body, mapping any decode failure to a 400."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
        raise MalformedRequestError()


def _email_domain(email: str) -> str:
    return email.rsplit("@", 1)[-1]


# =============================================================================
# Endpoints
# =============================================================================

@router.post(
    "/subscribe",
    response_model=SubscribeResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Missing or malformed email, or body is not a JSON object"},
        409: {"model": ErrorResponse, "description": "Email already subscribed"},
        413: {"model": ErrorResponse, "description": "Request body too large"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)
async def subscribe(request: Request, store: StoreDep, writer: WriterDep):
    """
    Subscribe an email to the newsletter.

    Body: {"email": "...", "name": "..."} where name is optional.

    Emails are compared case-insensitively; a second subscription for the
    same address is rejected with 409 no matter how often it is repeated.
    """
    body = await read_body(request, settings.MAX_BODY_SIZE_BYTES)
    subscription = SubscribeRequest.from_payload(parse_json_body(body))

    try:
        already_subscribed = await store.exists(subscription.email)
    except StorageCorruptError as e:
        # The writer preserves the unreadable file before writing a new one
        logger.error(f"{e.message}; duplicate check treats the store as empty")
        already_subscribed = False

    if already_subscribed:
        logger.info(f"Duplicate subscription rejected for @{_email_domain(subscription.email)}")
        raise DuplicateSubscriberError(subscription.email)

    await writer.submit(subscription.to_subscriber())

    logger.info(f"New subscriber @{_email_domain(subscription.email)}")
    return SubscribeResponse()
