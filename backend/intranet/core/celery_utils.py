"""Helpers for queueing Celery tasks."""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def safe_celery_delay(task, *args, **kwargs) -> Optional[Any]:
    """
    Queue a Celery task without failing the caller.

    When the broker is unreachable (no Redis in local development) the error
    is logged and None is returned instead.

    Returns:
        The AsyncResult from task.delay() or None if the task was not queued
    """
    try:
        result = task.delay(*args, **kwargs)
        logger.debug("Celery task %s queued with ID: %s", task.name, result.id)
        return result
    except Exception as e:
        logger.warning("Failed to queue Celery task %s: %s", task.name, e)
        return None
