import pytest

from intranet.main import maintenance_message
from intranet.services import settings as settings_service

SETTINGS = "/api/v1/settings"


def test_defaults_are_returned_without_rows(session):
    values = settings_service.get_all_settings(session)
    assert values["siteName"] == "ARL Intranet"
    assert values["maintenanceMode"] is False
    assert not settings_service.is_maintenance_mode(session)


@pytest.mark.parametrize(
    "key, raw, expected",
    [
        ("maintenanceMode", "true", True),
        ("maintenanceMode", "no", False),
        ("maintenanceMode", 1, False),
        ("sessionTimeoutHours", "12", 12),
        ("sessionTimeoutHours", 1.5, 1.5),
        ("siteName", 42, "42"),
    ],
)
def test_coerce_value(key, raw, expected):
    assert settings_service.coerce_value(key, raw) == expected


def test_coerce_rejects_unknown_keys_and_bad_numbers():
    with pytest.raises(ValueError):
        settings_service.coerce_value("notASetting", "x")
    with pytest.raises(ValueError):
        settings_service.coerce_value("maxLoginAttempts", "many")


def test_update_settings_is_all_or_nothing(session):
    with pytest.raises(ValueError):
        settings_service.update_settings(session, {"siteName": "New", "bogus": 1})
    assert settings_service.get_setting(session, "siteName") == "ARL Intranet"


def test_public_settings_endpoint(client):
    response = client.get(f"{SETTINGS}/public")
    assert response.status_code == 200
    assert set(response.json()) == set(settings_service.PUBLIC_KEYS)


def test_admin_reads_grouped_settings(client, admin_headers):
    response = client.get(f"{SETTINGS}/", headers=admin_headers)
    assert response.status_code == 200
    groups = response.json()
    assert {"general", "notifications", "security", "system"} <= set(groups)
    assert any(item["key"] == "maintenanceMode" for item in groups["general"])


def test_admin_update_rejects_unknown_key(client, admin_headers):
    response = client.put(f"{SETTINGS}/", json={"settings": {"nope": True}}, headers=admin_headers)
    assert response.status_code == 400


def test_maintenance_mode_gates_public_endpoints(client, admin_headers, user_headers):
    response = client.put(
        f"{SETTINGS}/",
        json={"settings": {"maintenanceMode": True, "maintenanceMessage": "Back at 6pm"}},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["settings"]["maintenanceMode"] is True

    blocked = client.get("/api/v1/news/")
    assert blocked.status_code == 503
    assert blocked.json() == {"detail": "Back at 6pm", "maintenance": True}
    assert client.get("/api/v1/auth/me", headers=user_headers).status_code == 503

    # Admin, health and public settings stay reachable
    assert client.get("/api/v1/admin/me", headers=admin_headers).status_code == 200
    assert client.get("/api/v1/health/").status_code == 200
    assert client.get(f"{SETTINGS}/public").json()["maintenanceMode"] is True

    turned_off = client.put(f"{SETTINGS}/", json={"settings": {"maintenanceMode": False}}, headers=admin_headers)
    assert turned_off.status_code == 200
    assert turned_off.json()["settings"]["maintenanceMode"] is False
    assert client.get("/api/v1/news/").status_code == 200


def test_admin_token_passes_maintenance_on_content_routes(client, admin_headers):
    client.put(f"{SETTINGS}/", json={"settings": {"maintenanceMode": True}}, headers=admin_headers)

    assert client.get(f"{SETTINGS}/", headers=admin_headers).status_code == 200
    created = client.post(
        "/api/v1/news/",
        json={"title": "Plant shutdown", "content": "<p>Scheduled for Friday</p>"},
        headers=admin_headers,
    )
    assert created.status_code == 201

    # A forged or non-admin bearer token is still gated
    forged = {"Authorization": "Bearer not-a-token"}
    assert client.get("/api/v1/news/", headers=forged).status_code == 503


def test_health(client):
    assert client.get("/api/v1/health/").json() == {"status": "ok"}
    ready = client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["database"] == "connected"


def test_maintenance_message_reads_current_settings(session):
    assert maintenance_message() is None

    settings_service.update_settings(session, {"maintenanceMode": True, "maintenanceMessage": "Network upgrade"})
    assert maintenance_message() == "Network upgrade"
