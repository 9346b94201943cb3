# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the Nafez landing page server.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.config import settings
from app.exceptions import (
    NafezError,
    nafez_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.routers import alpha, health, site, subscribe
from core.services import SubscriberStore, SubscriptionWriter

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Create the subscriber store file if absent, start the writer
    - Shutdown: Stop the writer, failing anything still queued
    """
    logger.info(f"Starting Nafez landing server in {settings.ENVIRONMENT} mode")

    store = SubscriberStore(settings.subscribers_path)
    store.ensure_exists()
    writer = SubscriptionWriter(store)
    writer.start()

    app.state.subscriber_store = store
    app.state.subscription_writer = writer

    logger.info(f"Serving static files from {settings.STATIC_DIR}")
    logger.info(f"Subscriber store: {store.path}")

    yield

    logger.info("Shutting down Nafez landing server")
    await writer.stop()


# Create FastAPI application
app = FastAPI(
    title="Nafez Landing API",
    description="""
## Landing page and newsletter sign-up

Serves the static landing page and records newsletter subscribers.

```bash
curl -X POST http://localhost:3000/subscribe \\
  -H "Content-Type: application/json" \\
  -d '{"email": "ann@example.com", "name": "Ann"}'
```

| Status | Meaning |
|--------|---------|
| 200 | Subscribed |
| 400 | Missing/invalid email or malformed body |
| 409 | Already subscribed |
| 413 | Body too large |
| 500 | Storage failure |
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Subscribe",
            "description": "Newsletter subscription",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(NafezError)
async def handle_nafez_exception(request: Request, exc: NafezError):
    """Handle custom Nafez exceptions."""
    return await nafez_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_exception(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    return await unhandled_exception_handler(request, exc)


# =============================================================================
# Routers
# =============================================================================

# Subscription endpoint
app.include_router(
    subscribe.router,
    tags=["Subscribe"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Alpha redirect
app.include_router(alpha.router)

# Static landing page (catch-all, must stay last)
app.include_router(site.router)


def main():
    """Run the server with uvicorn."""
    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
