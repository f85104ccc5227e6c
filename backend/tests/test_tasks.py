from datetime import datetime, timedelta

from sqlmodel import select

from conftest import FakeSender
from intranet.db import session_factory
from intranet.models import OtpCode, RefreshToken
from intranet.services.web_push import PushConfig, PushDeliveryService, save_subscription
from intranet.tasks import push as push_tasks
from intranet.tasks.maintenance import cleanup_expired_tokens


def test_cleanup_task_sweeps_tokens_and_codes(session, portal_user):
    now = datetime.utcnow()
    session.add(RefreshToken(user_id=portal_user.id, token_hash="stale", expires_at=now - timedelta(days=2)))
    session.add(
        OtpCode(recipient=portal_user.phone, code_hash="x", expires_at=now - timedelta(hours=3), created_at=now - timedelta(hours=3))
    )
    session.commit()

    result = cleanup_expired_tokens()

    assert result == {"refresh_tokens": 1, "blacklisted_tokens": 0, "otp_codes": 1}
    assert session.exec(select(RefreshToken)).all() == []


def test_broadcast_task_returns_delivery_report(session, monkeypatch):
    save_subscription(session, "https://push.example/ok", {"p256dh": "k", "auth": "a"})
    save_subscription(session, "https://push.example/gone", {"p256dh": "k", "auth": "a"})
    sender = FakeSender(fail_with={"https://push.example/gone": 410})
    service = PushDeliveryService(PushConfig("pub", "priv"), sender, session_factory)
    monkeypatch.setattr(push_tasks, "build_push_service", lambda: service)

    report = push_tasks.broadcast_push_task("Gate closed", "Use gate 2", "/news")

    assert report == {"sent": 1, "failed": 1, "pruned": 1, "stale_endpoints": ["https://push.example/gone"]}
