"""Push announcements for newly published content."""

from __future__ import annotations

import logging

from fastapi import BackgroundTasks
from sqlmodel import Session

from intranet.services.settings import get_setting
from intranet.services.web_push import PushDeliveryService, PushPayload

logger = logging.getLogger(__name__)


def announce(
    background_tasks: BackgroundTasks,
    push_service: PushDeliveryService,
    session: Session,
    payload: PushPayload,
) -> bool:
    """Queue a fan-out after the response is sent. Returns False when push is off."""
    if not push_service.is_configured:
        return False
    if not get_setting(session, "enablePushNotifications"):
        logger.info("Push notifications disabled in settings, not announcing %r", payload.title)
        return False
    background_tasks.add_task(push_service.send_to_all, payload)
    return True
