import asyncio
import json

from sqlmodel import select

from conftest import FakeSender
from intranet.db import session_factory
from intranet.models import PushSubscription
from intranet.services.web_push import (
    PushConfig,
    PushDeliveryService,
    PushPayload,
    remove_subscription,
    save_subscription,
)

API = "/api/v1/push"
KEYS = {"p256dh": "BNcRdreALRFXTkOOUHK1EtK2wtaz5Ry4YfYCA_0QTpQtUbVlUls0VJXg7A8u-Ts1XbjhazAkj7I99e8QcYP7DkM", "auth": "tBHItJI5svbpez7KI4CCXg"}


def _subscribe_many(session, count):
    endpoints = [f"https://fcm.googleapis.com/fcm/send/device-{i}" for i in range(count)]
    for endpoint in endpoints:
        save_subscription(session, endpoint, KEYS)
    return endpoints


def test_save_subscription_twice_keeps_one_row_with_latest_keys(session):
    endpoint = "https://updates.push.services.mozilla.com/wpush/v2/abc"
    save_subscription(session, endpoint, KEYS)
    save_subscription(session, endpoint, {"p256dh": "new-key", "auth": "new-auth"})

    rows = session.exec(select(PushSubscription)).all()
    assert len(rows) == 1
    assert rows[0].p256dh == "new-key"
    assert rows[0].auth == "new-auth"


def test_resubscribe_without_user_keeps_the_link(session, portal_user):
    endpoint = "https://fcm.googleapis.com/fcm/send/linked"
    save_subscription(session, endpoint, KEYS, user_id=portal_user.id)
    saved = save_subscription(session, endpoint, KEYS)
    assert saved.user_id == portal_user.id


def test_remove_subscription(session):
    endpoint = _subscribe_many(session, 1)[0]
    assert remove_subscription(session, endpoint)
    assert not remove_subscription(session, endpoint)


def test_fan_out_prunes_gone_subscriptions(session):
    endpoints = _subscribe_many(session, 5)
    gone = {endpoints[1]: 410, endpoints[3]: 404}
    sender = FakeSender(fail_with={**gone, endpoints[4]: 500})
    service = PushDeliveryService(PushConfig("pub", "priv"), sender, session_factory)

    report = asyncio.run(service.send_to_all(PushPayload(title="Hello", body="World", url="/news")))

    assert report.sent == 2
    assert report.failed == 3
    assert report.pruned == 2
    assert sorted(report.stale_endpoints) == sorted(gone)
    remaining = {row.endpoint for row in session.exec(select(PushSubscription)).all()}
    # A 500 is not a reason to drop the subscription
    assert remaining == {endpoints[0], endpoints[2], endpoints[4]}
    assert json.loads(sender.sent[0][1]) == {"title": "Hello", "body": "World", "url": "/news"}


def test_fan_out_respects_concurrency_cap(session):
    _subscribe_many(session, 6)
    sender = FakeSender(delay=0.05)
    service = PushDeliveryService(PushConfig("pub", "priv", max_concurrency=2), sender, session_factory)
    report = service.send_to_all_sync(PushPayload(title="t", body="b"))
    assert report.sent == 6
    assert len(sender.sent) == 6
    assert 1 <= sender.peak <= 2


def test_unconfigured_service_sends_nothing(session):
    _subscribe_many(session, 2)
    sender = FakeSender()
    service = PushDeliveryService(PushConfig("", ""), sender, session_factory)
    report = service.send_to_all_sync(PushPayload(title="t", body="b"))
    assert report.sent == 0
    assert sender.sent == []


def test_vapid_key_unavailable_without_configuration(client):
    response = client.get(f"{API}/vapid-public-key")
    assert response.status_code == 503
    assert response.json()["detail"] == "Push notifications not configured"


def test_vapid_key_returned_when_configured(client, push_service):
    response = client.get(f"{API}/vapid-public-key")
    assert response.status_code == 200
    assert response.json() == {"publicKey": "test-public-key"}


def test_subscribe_links_signed_in_user(client, session, portal_user, user_headers):
    endpoint = "https://fcm.googleapis.com/fcm/send/api"
    response = client.post(f"{API}/subscribe", json={"endpoint": endpoint, "keys": KEYS}, headers=user_headers)
    assert response.status_code == 201
    assert response.json()["endpoint"] == endpoint

    row = session.exec(select(PushSubscription)).one()
    assert row.user_id == portal_user.id

    unsubscribed = client.post(f"{API}/unsubscribe", json={"endpoint": endpoint})
    assert unsubscribed.json()["removed"] is True


def test_anonymous_subscribe(client, session):
    response = client.post(f"{API}/subscribe", json={"endpoint": "https://push.example/anon", "keys": KEYS})
    assert response.status_code == 201
    assert session.exec(select(PushSubscription)).one().user_id is None


def test_admin_test_push_fans_out(client, session, admin_headers, push_service, fake_sender):
    _subscribe_many(session, 3)
    response = client.post(f"{API}/test", json={"title": "Ping"}, headers=admin_headers)
    assert response.status_code == 202
    assert len(fake_sender.sent) == 3


def test_test_push_requires_admin(client, user_headers, push_service):
    response = client.post(f"{API}/test", json={}, headers=user_headers)
    assert response.status_code == 401


def test_broadcast_runs_in_process_without_broker(client, session, admin_headers, push_service, fake_sender, monkeypatch):
    monkeypatch.setattr("intranet.api.v1.push.safe_celery_delay", lambda *args, **kwargs: None)
    _subscribe_many(session, 2)
    response = client.post(f"{API}/broadcast", json={"title": "Shutdown", "body": "Plant closed"}, headers=admin_headers)
    assert response.status_code == 202
    assert response.json()["worker"] is False
    assert len(fake_sender.sent) == 2
