import asyncio
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional, Protocol
from uuid import UUID

from pywebpush import WebPushException, webpush
from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from intranet.core.config import Settings
from intranet.models.push_subscription import PushSubscription

logger = logging.getLogger(__name__)

# Push services answer 404/410 once a subscription is gone for good
STALE_STATUS_CODES = frozenset({404, 410})


@dataclass(frozen=True)
class PushConfig:
    """VAPID credentials and fan-out limits, built once at startup."""

    public_key: str
    private_key: str
    subject: str = "mailto:admin@arl.com"
    max_concurrency: int = 0  # 0 = unbounded
    timeout: float = 10.0

    @property
    def is_configured(self) -> bool:
        return bool(self.public_key and self.private_key)

    @classmethod
    def from_settings(cls, config: Settings) -> "PushConfig":
        return cls(
            public_key=config.VAPID_PUBLIC_KEY,
            private_key=config.VAPID_PRIVATE_KEY,
            subject=config.VAPID_SUBJECT,
            max_concurrency=max(config.PUSH_MAX_CONCURRENCY, 0),
            timeout=config.PUSH_TIMEOUT_SECONDS,
        )


class PushDeliveryError(Exception):
    """A single push send failed. ``status_code`` is None for transport errors."""

    def __init__(self, status_code: Optional[int] = None, message: str = ""):
        super().__init__(message or f"Push delivery failed (status={status_code})")
        self.status_code = status_code


class NotificationSender(Protocol):
    def send(self, subscription_info: dict, data: str, config: PushConfig) -> None:
        """Deliver one notification. Raises PushDeliveryError on failure."""


class WebPushSender:
    """Sends through pywebpush (blocking HTTP)."""

    def send(self, subscription_info: dict, data: str, config: PushConfig) -> None:
        try:
            webpush(
                subscription_info=subscription_info,
                data=data,
                vapid_private_key=config.private_key,
                # pywebpush adds aud/exp to the claims dict, so pass a fresh one
                vapid_claims={"sub": config.subject},
                timeout=config.timeout,
            )
        except WebPushException as e:
            status_code = e.response.status_code if e.response is not None else None
            raise PushDeliveryError(status_code, str(e)) from e
        except Exception as e:
            raise PushDeliveryError(None, str(e)) from e


@dataclass
class PushPayload:
    title: str
    body: str
    url: str = "/"

    def to_json(self) -> str:
        return json.dumps({"title": self.title, "body": self.body, "url": self.url or "/"})


@dataclass
class DeliveryReport:
    sent: int = 0
    failed: int = 0
    pruned: int = 0
    stale_endpoints: list[str] = field(default_factory=list)


def save_subscription(
    session: Session,
    endpoint: str,
    keys: dict,
    user_id: Optional[UUID] = None,
) -> PushSubscription:
    """Create or update the subscription for ``endpoint``. The latest keys win.

    An existing user link is kept when ``user_id`` is not given.
    """
    for _ in range(2):
        subscription = session.exec(
            select(PushSubscription).where(PushSubscription.endpoint == endpoint)
        ).first()
        if subscription is None:
            subscription = PushSubscription(endpoint=endpoint, p256dh=keys["p256dh"], auth=keys["auth"])
        else:
            subscription.p256dh = keys["p256dh"]
            subscription.auth = keys["auth"]
            subscription.updated_at = datetime.utcnow()
        if user_id is not None:
            subscription.user_id = user_id
        session.add(subscription)
        try:
            session.commit()
        except IntegrityError:
            # Same endpoint inserted concurrently, update that row instead
            session.rollback()
            continue
        session.refresh(subscription)
        return subscription
    raise RuntimeError(f"Could not save push subscription for {endpoint[:60]}")


def remove_subscription(session: Session, endpoint: str) -> bool:
    """Delete the subscription. Returns False if there was none."""
    result = session.execute(delete(PushSubscription).where(PushSubscription.endpoint == endpoint))
    session.commit()
    return bool(result.rowcount)


class PushDeliveryService:
    """Fans a notification out to every stored subscription."""

    def __init__(
        self,
        config: PushConfig,
        sender: NotificationSender,
        session_factory: Callable[[], Session],
    ):
        self.config = config
        self.sender = sender
        self.session_factory = session_factory

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    def _load_subscriptions(self) -> list[dict]:
        with self.session_factory() as session:
            rows = session.exec(select(PushSubscription)).all()
            return [
                {"endpoint": row.endpoint, "keys": {"p256dh": row.p256dh, "auth": row.auth}}
                for row in rows
            ]

    def _prune(self, endpoints: list[str]) -> int:
        with self.session_factory() as session:
            result = session.execute(delete(PushSubscription).where(PushSubscription.endpoint.in_(endpoints)))
            session.commit()
            return result.rowcount or 0

    async def _send_one(
        self,
        subscription_info: dict,
        data: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> Optional[PushDeliveryError]:
        try:
            if semaphore is None:
                await asyncio.to_thread(self.sender.send, subscription_info, data, self.config)
            else:
                async with semaphore:
                    await asyncio.to_thread(self.sender.send, subscription_info, data, self.config)
        except PushDeliveryError as e:
            logger.error(
                "Push failed for %s... status: %s",
                subscription_info["endpoint"][:60],
                e.status_code,
            )
            return e
        return None

    async def send_to_all(self, payload: PushPayload) -> DeliveryReport:
        """Send ``payload`` to all subscriptions and prune the stale ones. Never raises."""
        report = DeliveryReport()
        if not self.is_configured:
            logger.info("VAPID keys not configured, skipping push")
            return report

        try:
            subscriptions = await asyncio.to_thread(self._load_subscriptions)
            logger.info("Sending push to %s subscribers", len(subscriptions))
            if not subscriptions:
                return report

            data = payload.to_json()
            semaphore = asyncio.Semaphore(self.config.max_concurrency) if self.config.max_concurrency > 0 else None
            outcomes = await asyncio.gather(
                *(self._send_one(info, data, semaphore) for info in subscriptions),
                return_exceptions=True,
            )

            for info, outcome in zip(subscriptions, outcomes):
                if outcome is None:
                    report.sent += 1
                    continue
                report.failed += 1
                if isinstance(outcome, PushDeliveryError) and outcome.status_code in STALE_STATUS_CODES:
                    report.stale_endpoints.append(info["endpoint"])
                elif not isinstance(outcome, PushDeliveryError):
                    logger.error("Unexpected push error for %s...: %r", info["endpoint"][:60], outcome)

            logger.info(
                "Push done: %s sent, %s failed, %s stale",
                report.sent,
                report.failed,
                len(report.stale_endpoints),
            )

            if report.stale_endpoints:
                report.pruned = await asyncio.to_thread(self._prune, report.stale_endpoints)
                logger.info("Cleaned %s stale subscriptions", report.pruned)
        except Exception:
            logger.exception("Push fan-out failed")
        return report

    def send_to_all_sync(self, payload: PushPayload) -> DeliveryReport:
        """Blocking entry point for Celery workers and scripts."""
        return asyncio.run(self.send_to_all(payload))
