from datetime import date

from sqlmodel import select

from intranet.models import PushSubscription, RefreshToken, User
from intranet.services import news as news_service
from intranet.services import tokens
from intranet.services.admin_users import authenticate_admin
from intranet.services.web_push import save_subscription

API = "/api/v1/admin"


def test_admin_login(client, admin):
    response = client.post(f"{API}/login", json={"email": "ADMIN@arl.com", "password": "admin-password-1"})
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["admin"]["email"] == "admin@arl.com"

    me = client.get(f"{API}/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Portal Admin"


def test_admin_login_wrong_password(client, admin):
    response = client.post(f"{API}/login", json={"email": "admin@arl.com", "password": "nope"})
    assert response.status_code == 401


def test_inactive_admin_cannot_authenticate(session, admin):
    admin.is_active = False
    session.add(admin)
    session.commit()
    assert authenticate_admin(session, "admin@arl.com", "admin-password-1") is None


def test_portal_token_is_not_an_admin_token(client, user_headers):
    assert client.get(f"{API}/me", headers=user_headers).status_code == 401


def test_dashboard_counts(client, session, admin_headers, portal_user):
    news_service.create_news(session, {"title": "Live", "content": "a", "status": "published"})
    news_service.create_news(session, {"title": "Draft", "content": "b"})
    save_subscription(session, "https://push.example/1", {"p256dh": "k", "auth": "a"})

    response = client.get(f"{API}/dashboard", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["counts"]["published_news"] == 1
    assert body["counts"]["draft_news"] == 1
    assert body["counts"]["portal_users"] == 1
    assert body["counts"]["push_subscribers"] == 1
    assert len(body["activity"]) == 7
    assert body["activity"][-1]["news"] == 2
    assert body["content_status"][0] == {"name": "News", "published": 1, "draft": 1, "archived": 0}


def test_create_user_normalizes_phone(client, admin, admin_headers, session):
    response = client.post(
        f"{API}/users",
        json={"name": "Abena Owusu", "phone": "+233 20 555 0101", "position": "Metallurgist"},
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    assert response.json()["phone"] == "233205550101"
    assert session.exec(select(User).where(User.phone == "233205550101")).one().created_by == admin.id

    duplicate = client.post(f"{API}/users", json={"name": "Copy", "phone": "0205550101"}, headers=admin_headers)
    assert duplicate.status_code == 409

    invalid = client.post(f"{API}/users", json={"name": "Bad", "phone": "123456789012"}, headers=admin_headers)
    assert invalid.status_code == 400


def test_list_users_with_search(client, admin_headers, portal_user):
    body = client.get(f"{API}/users", params={"search": "kwame"}, headers=admin_headers).json()
    assert body["total"] == 1
    assert body["items"][0]["id"] == str(portal_user.id)
    assert client.get(f"{API}/users", params={"search": "nobody"}, headers=admin_headers).json()["total"] == 0


def test_deactivating_a_user_revokes_sessions(client, session, admin_headers, portal_user, user_tokens):
    response = client.post(f"{API}/users/{portal_user.id}/toggle-status", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert not tokens.rotate_refresh_token(session, user_tokens.refresh_token).success

    reactivated = client.post(f"{API}/users/{portal_user.id}/toggle-status", headers=admin_headers)
    assert reactivated.json()["is_active"] is True


def test_update_user_to_inactive_revokes_sessions(client, session, admin_headers, portal_user, user_tokens):
    response = client.patch(f"{API}/users/{portal_user.id}", json={"is_active": False, "role": "manager"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "manager"
    active = session.exec(select(RefreshToken).where(RefreshToken.is_revoked == False)).all()  # noqa: E712
    assert active == []


def test_force_logout(client, admin_headers, portal_user, user_tokens):
    response = client.post(f"{API}/users/{portal_user.id}/force-logout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["revoked"] == 1
    assert client.post("/api/v1/auth/refresh", json={"refresh_token": user_tokens.refresh_token}).status_code == 401


def test_delete_user_keeps_unlinked_subscriptions(client, session, admin_headers, portal_user, user_tokens):
    save_subscription(session, "https://push.example/linked", {"p256dh": "k", "auth": "a"}, user_id=portal_user.id)

    user_id = portal_user.id
    response = client.delete(f"{API}/users/{user_id}", headers=admin_headers)
    assert response.status_code == 204
    session.expire_all()
    assert session.exec(select(User).where(User.id == user_id)).first() is None
    assert session.exec(select(RefreshToken)).all() == []
    assert session.exec(select(PushSubscription)).one().user_id is None

    assert client.delete(f"{API}/users/{user_id}", headers=admin_headers).status_code == 404


def test_user_management_requires_admin(client):
    assert client.get(f"{API}/users").status_code == 401
    assert client.get(f"{API}/dashboard").status_code == 401


def test_dashboard_activity_window_ends_today(session):
    from intranet.services.dashboard import get_dashboard

    activity = get_dashboard(session, today=date(2024, 3, 7))["activity"]
    assert activity[0]["date"] == "2024-03-01"
    assert activity[-1]["date"] == "2024-03-07"


def test_admin_login_is_rate_limited(client, admin):
    from intranet.core.limiter import limiter

    limiter.reset()
    limiter.enabled = True
    try:
        statuses = [
            client.post(f"{API}/login", json={"email": "admin@arl.com", "password": "wrong"}).status_code
            for _ in range(11)
        ]
    finally:
        limiter.enabled = False
        limiter.reset()
    assert statuses[:10] == [401] * 10
    assert statuses[10] == 429
