"""Celery application configuration."""

from __future__ import annotations

import logging

from celery import Celery
from celery.schedules import crontab

from intranet.core.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "intranet",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["intranet.tasks.maintenance", "intranet.tasks.push"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    broker_connection_retry_on_startup=True,
    task_acks_late=True,  # Acknowledge tasks after execution
    task_reject_on_worker_lost=True,
    task_default_retry_delay=60,
    task_max_retries=3,
    result_expires=3600,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=500,
)

celery_app.conf.beat_schedule = {
    # Refresh tokens past the grace window, expired blacklist entries and OTP codes
    "cleanup-expired-tokens": {
        "task": "intranet.tasks.maintenance.cleanup_expired_tokens",
        "schedule": crontab(minute=0),  # Hourly
    },
}

logger.info("Celery app configured with broker: %s", settings.CELERY_BROKER_URL)
