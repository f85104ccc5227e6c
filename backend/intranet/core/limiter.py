"""Rate limiting configuration."""

from __future__ import annotations

import logging

from fastapi import Request
from slowapi import Limiter

from intranet.core.config import settings

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Real client IP behind a reverse proxy."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "127.0.0.1"


# memory:// for single-instance deployments, redis://... when running several workers
limiter = Limiter(
    key_func=get_client_ip,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    default_limits=["1000/hour"],
    enabled=settings.RATE_LIMIT_ENABLED,
)
logger.info(
    "Rate limiter configured (storage=%s, enabled=%s)",
    settings.RATE_LIMIT_STORAGE_URI,
    settings.RATE_LIMIT_ENABLED,
)
