# =============================================================================
# workers/config.py - Celery Worker Configuration
# =============================================================================
# Settings specific to Celery workers and the beat schedule.
# =============================================================================

from celery.schedules import crontab

from app.config import settings


class CeleryConfig:
    """
    Celery configuration settings.

    These are applied to the Celery app via app.config_from_object().
    """

    # -------------------------------------------------------------------------
    # Broker Settings (Redis)
    # -------------------------------------------------------------------------

    broker_url = settings.REDIS_URL
    result_backend = settings.REDIS_URL

    # -------------------------------------------------------------------------
    # Task Settings
    # -------------------------------------------------------------------------

    # Acknowledge after completion so a crashed worker's task is redelivered
    task_acks_late = True

    worker_prefetch_multiplier = 1

    # Task results expire after 1 day
    result_expires = 86400

    # Refreshing every school can take a while
    task_time_limit = 1800
    task_soft_time_limit = 1500

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    task_serializer = "json"
    result_serializer = "json"
    accept_content = ["json"]

    # -------------------------------------------------------------------------
    # Task Routing
    # -------------------------------------------------------------------------

    task_queues = {
        "default": {
            "exchange": "default",
            "routing_key": "default",
        },
        "champion": {
            "exchange": "champion",
            "routing_key": "champion",
        },
    }

    # Per-user evaluation loops go to their own queue
    task_routes = {
        "workers.tasks.batch_check_champions": {"queue": "champion"},
    }

    task_default_queue = "default"

    # -------------------------------------------------------------------------
    # Retry Settings
    # -------------------------------------------------------------------------

    task_annotations = {
        "*": {
            "max_retries": 3,
            "default_retry_delay": 60,
        }
    }

    # -------------------------------------------------------------------------
    # Beat Schedule
    # -------------------------------------------------------------------------

    # Next month's criteria, once menus for it are published
    beat_schedule = {
        "refresh-next-month-criteria": {
            "task": "workers.tasks.refresh_next_month_criteria",
            "schedule": crontab(minute=0, hour=3, day_of_month=settings.CRITERIA_SCHEDULE_DAY),
        },
    }

    # -------------------------------------------------------------------------
    # Monitoring
    # -------------------------------------------------------------------------

    worker_send_task_events = True
    task_send_sent_event = True

    # -------------------------------------------------------------------------
    # Timezone
    # -------------------------------------------------------------------------

    # Beat fires in school-local time
    timezone = settings.SCHOOL_TIMEZONE
    enable_utc = True
