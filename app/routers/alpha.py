# =============================================================================
# app/routers/alpha.py - Alpha App Redirect
# =============================================================================
# The alpha application runs elsewhere. Any GET/HEAD under /alpha is sent
# there with a 302, keeping the remainder of the path and the query string.
#
#   /alpha, /alpha/       -> {ALPHA_ORIGIN}{ALPHA_BASE_PATH}/login
#   /alpha/dashboard?x=1  -> {ALPHA_ORIGIN}{ALPHA_BASE_PATH}/dashboard?x=1
# =============================================================================

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse

from app.config import settings

router = APIRouter()

ALPHA_PREFIX = "/alpha"
ALPHA_LANDING = "/login"


def build_alpha_target(path: str, query: str = "") -> str:
    """
    Compute the redirect target for a request path under /alpha.

    Args:
        path: Request path, either "/alpha" or starting with "/alpha/"
        query: Raw query string without the leading "?"

    Returns:
        Absolute URL on the alpha origin
    """
    remainder = path[len(ALPHA_PREFIX):] or "/"
    if not remainder.startswith("/"):
        remainder = "/" + remainder
    if remainder == "/":
        remainder = ALPHA_LANDING

    target = f"{settings.ALPHA_ORIGIN}{settings.ALPHA_BASE_PATH}{remainder}"
    if query:
        target += f"?{query}"
    return target


@router.api_route(ALPHA_PREFIX, methods=["GET", "HEAD"], include_in_schema=False)
@router.api_route(ALPHA_PREFIX + "/{rest:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def redirect_to_alpha(request: Request):
    """Redirect to the alpha application."""
    return RedirectResponse(
        build_alpha_target(request.url.path, request.url.query),
        status_code=302,
    )
