"""Celery tasks for push notifications."""

from __future__ import annotations

import logging
from dataclasses import asdict

from intranet.celery_app import celery_app
from intranet.core.config import settings
from intranet.db import session_factory
from intranet.services.web_push import PushConfig, PushDeliveryService, PushPayload, WebPushSender

logger = logging.getLogger(__name__)


def build_push_service() -> PushDeliveryService:
    return PushDeliveryService(PushConfig.from_settings(settings), WebPushSender(), session_factory)


@celery_app.task
def broadcast_push_task(title: str, body: str, url: str = "/") -> dict:
    """
    Send a notification to every subscriber from a worker.

    Args:
        title: Notification title
        body: Notification text
        url: Page opened when the notification is clicked

    Returns:
        dict: Delivery report (sent, failed, pruned, stale_endpoints)
    """
    report = build_push_service().send_to_all_sync(PushPayload(title=title, body=body, url=url))
    logger.info("Broadcast %r: %s sent, %s failed", title, report.sent, report.failed)
    return asdict(report)
