"""
Celery Configuration

Redis-brokered Celery settings for the maintenance workers: the hourly
temp link sweep and the nightly abandoned-upload cleanup, both on their
own queue so they never wait behind request-driven work.
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Queue

SWEEP_TASK = "filevault.tasks.sweep_expired_links"
CLEANUP_TASK = "filevault.tasks.cleanup_abandoned_uploads"
MAINTENANCE_QUEUE = "maintenance"


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


class CeleryConfig:
    """Values loaded into the Celery app via config_from_object()."""

    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    # Maintenance tasks report through logs; nothing reads their results
    task_ignore_result = True

    task_serializer = "json"
    accept_content = ["json"]
    timezone = "UTC"
    enable_utc = True

    # A sweep or cleanup interrupted mid-run is safe to redeliver
    task_acks_late = True
    worker_prefetch_multiplier = 1
    worker_concurrency = _env_int("CELERY_WORKER_CONCURRENCY", 1)

    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue(MAINTENANCE_QUEUE, routing_key=MAINTENANCE_QUEUE),
    )
    task_routes = {
        SWEEP_TASK: {"queue": MAINTENANCE_QUEUE},
        CLEANUP_TASK: {"queue": MAINTENANCE_QUEUE},
    }

    beat_schedule = {
        "sweep-expired-links": {
            "task": SWEEP_TASK,
            "schedule": crontab(minute=_env_int("LINK_SWEEP_MINUTE", 0)),
        },
        "cleanup-abandoned-uploads": {
            "task": CLEANUP_TASK,
            "schedule": crontab(minute=30, hour=_env_int("UPLOAD_CLEANUP_HOUR", 3)),
        },
    }

    task_soft_time_limit = _env_int("CELERY_TASK_SOFT_TIME_LIMIT", 240)
    task_time_limit = _env_int("CELERY_TASK_TIME_LIMIT", 300)


def make_celery(name: str = "filevault") -> Celery:
    """Create the Celery app configured from CeleryConfig."""
    celery = Celery(name)
    celery.config_from_object(CeleryConfig)
    return celery
