"""Celery application for background tasks."""

from celery import Celery
from celery.signals import setup_logging

from .config import settings
from .logging_config import configure_logging

celery_app = Celery(
    "sports_cms",
    broker=settings.celery_broker,
    backend=settings.celery_backend,
    include=["app.tasks.minute_sync"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,
    result_expires=3600,
    beat_schedule={
        "sync-live-match-minutes": {
            "task": "app.tasks.minute_sync.sync_live_match_minutes",
            "schedule": float(settings.minute_sync_interval_seconds),
        },
    },
)


@setup_logging.connect
def _configure_worker_logging(**_: object) -> None:
    """Workers emit the same JSON log lines as the API."""
    configure_logging("sports-cms-worker", settings.environment, settings.log_level)
