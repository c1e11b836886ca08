# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - champion.py: Bucketing, criteria and champion endpoints
# - tasks.py: Background task status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import champion
from . import tasks

__all__ = [
    "health",
    "champion",
    "tasks",
]
