"""Periodic housekeeping tasks."""

from __future__ import annotations

import logging

from sqlmodel import Session

from intranet.celery_app import celery_app
from intranet.db import engine
from intranet.services import tokens
from intranet.services.otp import otp_service

logger = logging.getLogger(__name__)


@celery_app.task
def cleanup_expired_tokens() -> dict:
    """
    Delete refresh tokens past the grace window, expired blacklist entries
    and stale OTP codes.

    Returns:
        dict: Number of deleted rows per table
    """
    with Session(engine) as session:
        deleted = tokens.cleanup_expired_tokens(session)
        deleted["otp_codes"] = otp_service.cleanup_expired(session)

    logger.info(
        "Token cleanup: %s refresh tokens, %s blacklist entries, %s OTP codes deleted",
        deleted["refresh_tokens"],
        deleted["blacklisted_tokens"],
        deleted["otp_codes"],
    )
    return deleted
