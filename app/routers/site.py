# =============================================================================
# app/routers/site.py - Static Landing Page
# =============================================================================
# Serves the files under STATIC_DIR. Mounted last so every API route wins.
#
# - "/" and directories map to index.html
# - Paths resolving outside STATIC_DIR get 403
# - Content type comes from the file extension
# =============================================================================

import asyncio
import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse

from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

INDEX_FILE = "index.html"

CONTENT_TYPES = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".woff2": "font/woff2",
    ".woff": "font/woff",
    ".ttf": "font/ttf",
    ".otf": "font/otf",
}

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def content_type_for(path: Path) -> str:
    """Map a file extension to its content type (case-insensitive)."""
    return CONTENT_TYPES.get(path.suffix.lower(), DEFAULT_CONTENT_TYPE)


def resolve_static_path(root: Path, url_path: str) -> Path | None:
    """
    Resolve a URL path to a file path under root.

    Args:
        root: Static root directory
        url_path: Decoded request path, e.g. "/css/site.css"

    Returns:
        The candidate file path (which may not exist), or None if the path
        escapes the root
    """
    if "\x00" in url_path:
        return None
    if url_path in ("", "/"):
        url_path = "/" + INDEX_FILE

    root = root.resolve()
    try:
        candidate = (root / url_path.lstrip("/")).resolve()
    except (OSError, ValueError):
        return None

    if candidate != root and root not in candidate.parents:
        return None

    if candidate.is_dir():
        candidate = candidate / INDEX_FILE
    return candidate


def _locate(root: Path, url_path: str) -> tuple[int, Path | None]:
    target = resolve_static_path(root, url_path)
    if target is None:
        return 403, None
    if not target.is_file():
        return 404, None
    return 200, target


@router.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
async def serve_static(request: Request, path: str):
    """Serve a file from the static directory."""
    status, target = await asyncio.to_thread(_locate, settings.STATIC_DIR, request.url.path)

    if status == 403:
        logger.warning(f"Refused static path outside root: {request.url.path}")
        return PlainTextResponse("403 Forbidden", status_code=403)
    if status == 404:
        return PlainTextResponse("404 Not Found", status_code=404)

    return FileResponse(target, media_type=content_type_for(target))
