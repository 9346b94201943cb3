# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - routers/: Endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# storage to the core/ package.
# =============================================================================

__version__ = "1.0.0"
