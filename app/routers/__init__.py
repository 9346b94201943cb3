# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - subscribe.py: Newsletter subscription endpoint
# - health.py: Health check endpoints
# - alpha.py: Redirect to the alpha application
# - site.py: Static landing page (catch-all, mounted last)
#
# Each router is mounted in main.py.
# =============================================================================

from . import alpha
from . import health
from . import site
from . import subscribe

__all__ = [
    "alpha",
    "health",
    "site",
    "subscribe",
]
