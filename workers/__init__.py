# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# Celery configuration and task definitions for criteria refreshes and
# batch champion checks.
#
# Components:
# - celery_app.py: Celery application and lifecycle signal logging
# - tasks.py: Task definitions
# - config.py: Worker settings and the monthly beat schedule
#
# Usage:
#   celery -A workers.celery_app worker -Q default,champion --loglevel=info
#   celery -A workers.celery_app beat --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import batch_check_champions
#   result = batch_check_champions.delay("7010569", 2025, 6)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
