from datetime import datetime, timedelta

from sqlmodel import Session, select

from conftest import run_concurrently
from intranet.models import RefreshToken, TokenBlacklist, User
from intranet.services import tokens

API = "/api/v1/auth"


def _login(client, phone="0241234567", agent="pytest-phone"):
    requested = client.post(f"{API}/otp/request", json={"phone": phone})
    assert requested.status_code == 200, requested.text
    code = requested.json()["dev_code"]
    verified = client.post(
        f"{API}/otp/verify",
        json={"phone": phone, "otp": code},
        headers={"User-Agent": agent},
    )
    assert verified.status_code == 200, verified.text
    return verified.json()


def test_otp_request_for_unknown_phone_is_rejected(client):
    response = client.post(f"{API}/otp/request", json={"phone": "0209999999"})
    assert response.status_code == 400


def test_otp_login_returns_user_and_tokens(client, portal_user):
    body = _login(client)
    assert body["user"]["phone"] == "233241234567"
    assert body["user"]["login_count"] == 1
    assert body["tokens"]["token_type"] == "bearer"

    me = client.get(f"{API}/me", headers={"Authorization": f"Bearer {body['tokens']['access_token']}"})
    assert me.status_code == 200
    assert me.json()["name"] == portal_user.name


def test_wrong_code_is_unauthorized(client, portal_user):
    client.post(f"{API}/otp/request", json={"phone": "0241234567"})
    response = client.post(f"{API}/otp/verify", json={"phone": "0241234567", "otp": "abcdef"})
    assert response.status_code == 401


def test_rotated_refresh_token_cannot_be_reused(client, user_tokens):
    first = client.post(f"{API}/refresh", json={"refresh_token": user_tokens.refresh_token})
    assert first.status_code == 200
    new_refresh = first.json()["refresh_token"]
    assert new_refresh != user_tokens.refresh_token

    reused = client.post(f"{API}/refresh", json={"refresh_token": user_tokens.refresh_token})
    assert reused.status_code == 401
    assert reused.json()["detail"] == tokens.INVALID_REFRESH_MESSAGE

    assert client.post(f"{API}/refresh", json={"refresh_token": new_refresh}).status_code == 200


def test_rotation_service_rejects_second_use(session, portal_user):
    pair = tokens.issue_token_pair(session, portal_user)
    assert tokens.rotate_refresh_token(session, pair.refresh_token).success
    assert not tokens.rotate_refresh_token(session, pair.refresh_token).success


def test_concurrent_reuse_of_one_refresh_token_rotates_once(file_engine):
    with Session(file_engine) as setup:
        user = User(name="Ama Owusu", phone="233201112222")
        setup.add(user)
        setup.commit()
        setup.refresh(user)
        pair = tokens.issue_token_pair(setup, user, device_info="tablet")

    def rotate():
        with Session(file_engine) as s:
            return tokens.rotate_refresh_token(s, pair.refresh_token).success

    assert sorted(run_concurrently(rotate, count=2)) == [False, True]

    with Session(file_engine) as check:
        active = check.exec(select(RefreshToken).where(RefreshToken.is_revoked == False)).all()  # noqa: E712
        assert len(active) == 1


def test_access_token_is_not_a_refresh_token(client, user_tokens):
    response = client.post(f"{API}/refresh", json={"refresh_token": user_tokens.access_token})
    assert response.status_code == 401


def test_revoking_one_device_keeps_the_other(session, portal_user):
    phone = tokens.issue_token_pair(session, portal_user, device_info="phone")
    laptop = tokens.issue_token_pair(session, portal_user, device_info="laptop")

    assert tokens.revoke_refresh_token(session, phone.refresh_token)

    assert not tokens.rotate_refresh_token(session, phone.refresh_token).success
    assert tokens.rotate_refresh_token(session, laptop.refresh_token).success


def test_logout_blacklists_access_token(client, session, user_tokens, user_headers):
    response = client.post(
        f"{API}/logout",
        json={"refresh_token": user_tokens.refresh_token},
        headers=user_headers,
    )
    assert response.status_code == 200
    assert session.exec(select(TokenBlacklist)).first() is not None

    assert client.get(f"{API}/me", headers=user_headers).status_code == 401
    assert client.post(f"{API}/refresh", json={"refresh_token": user_tokens.refresh_token}).status_code == 401


def test_logout_all_revokes_every_session(client, session, portal_user, user_headers):
    other = tokens.issue_token_pair(session, portal_user, device_info="tablet")
    response = client.post(f"{API}/logout-all", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["revoked"] == 2
    assert client.post(f"{API}/refresh", json={"refresh_token": other.refresh_token}).status_code == 401


def test_sessions_can_be_listed_and_revoked(client, session, portal_user, user_headers):
    tokens.issue_token_pair(session, portal_user, device_info="tablet")
    listed = client.get(f"{API}/sessions", headers=user_headers)
    assert listed.status_code == 200
    devices = {row["device_info"]: row["id"] for row in listed.json()}
    assert set(devices) == {"pytest", "tablet"}

    revoked = client.delete(f"{API}/sessions/{devices['tablet']}", headers=user_headers)
    assert revoked.status_code == 204
    remaining = client.get(f"{API}/sessions", headers=user_headers).json()
    assert [row["device_info"] for row in remaining] == ["pytest"]


def test_deactivated_user_cannot_refresh(client, session, portal_user, user_tokens):
    portal_user.is_active = False
    session.add(portal_user)
    session.commit()
    response = client.post(f"{API}/refresh", json={"refresh_token": user_tokens.refresh_token})
    assert response.status_code == 401


def test_cleanup_removes_tokens_past_grace_window(session, portal_user):
    now = datetime.utcnow()
    session.add(
        RefreshToken(
            user_id=portal_user.id,
            token_hash="old",
            expires_at=now - timedelta(days=3),
        )
    )
    session.add(
        RefreshToken(
            user_id=portal_user.id,
            token_hash="recent",
            expires_at=now - timedelta(hours=1),
        )
    )
    session.add(TokenBlacklist(jti="gone", expires_at=now - timedelta(minutes=1)))
    session.commit()

    deleted = tokens.cleanup_expired_tokens(session)
    assert deleted == {"refresh_tokens": 1, "blacklisted_tokens": 1}
    assert [row.token_hash for row in session.exec(select(RefreshToken)).all()] == ["recent"]
