"""Pytest fixtures: test client, in-memory SQLite DB, admin and portal user."""
import os
import threading
import time

import pytest
from fastapi.testclient import TestClient

# Must be set before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "local"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SMS_API_KEY"] = ""
os.environ["EMAIL_API_KEY"] = ""
os.environ["VAPID_PUBLIC_KEY"] = ""
os.environ["VAPID_PRIVATE_KEY"] = ""
os.environ["REDIS_CACHE_URL"] = "redis://127.0.0.1:1/0"

from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from intranet.api.deps import get_push_service  # noqa: E402
from intranet.core.security import create_admin_token  # noqa: E402
from intranet.db import engine, session_factory  # noqa: E402
from intranet.main import app  # noqa: E402
from intranet.models import User  # noqa: E402
from intranet.services.admin_users import create_or_update_admin  # noqa: E402
from intranet.services.settings import clear_settings_cache  # noqa: E402
from intranet.services.tokens import issue_token_pair  # noqa: E402
from intranet.services.web_push import PushConfig, PushDeliveryError, PushDeliveryService  # noqa: E402


class FakeSender:
    """Records every send. Endpoints in ``fail_with`` raise the mapped status code.

    ``delay`` keeps each send in flight for a while so ``peak`` shows how many
    ran at the same time.
    """

    def __init__(self, fail_with=None, delay=0.0):
        self.fail_with = dict(fail_with or {})
        self.delay = delay
        self.sent = []
        self.in_flight = 0
        self.peak = 0
        self._lock = threading.Lock()

    def send(self, subscription_info, data, config):
        with self._lock:
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            endpoint = subscription_info["endpoint"]
            if endpoint in self.fail_with:
                raise PushDeliveryError(self.fail_with[endpoint])
            with self._lock:
                self.sent.append((endpoint, data))
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture(autouse=True)
def _reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def file_engine(tmp_path):
    """File-backed SQLite, so threads can race on their own connections."""
    race_engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SQLModel.metadata.create_all(race_engine)
    yield race_engine
    race_engine.dispose()


def run_concurrently(target, count=2):
    """Start ``count`` threads on ``target`` at the same moment and collect their return values."""
    barrier = threading.Barrier(count)
    results = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        value = target()
        with lock:
            results.append(value)

    threads = [threading.Thread(target=worker) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin(session):
    return create_or_update_admin(session, "admin@arl.com", "Portal Admin", "admin-password-1")


@pytest.fixture
def admin_headers(admin):
    issued = create_admin_token(admin.id, {"email": admin.email, "role": admin.role})
    return {"Authorization": f"Bearer {issued.token}"}


@pytest.fixture
def portal_user(session):
    user = User(name="Kwame Mensah", phone="233241234567", email="kwame.mensah@arl.com", position="Shift Supervisor")
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def user_tokens(session, portal_user):
    return issue_token_pair(session, portal_user, device_info="pytest")


@pytest.fixture
def user_headers(user_tokens):
    return {"Authorization": f"Bearer {user_tokens.access_token}"}


@pytest.fixture
def fake_sender():
    return FakeSender()


@pytest.fixture
def push_service(fake_sender):
    """Configured push service that delivers through ``fake_sender``, wired into the app."""
    service = PushDeliveryService(
        PushConfig(public_key="test-public-key", private_key="test-private-key"),
        fake_sender,
        session_factory,
    )
    app.dependency_overrides[get_push_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_push_service, None)
