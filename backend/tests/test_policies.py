from uuid import uuid4

import pytest
from sqlmodel import Session

from conftest import run_concurrently
from intranet.models import Policy
from intranet.services import policies as policy_service
from intranet.services.results import FailureReason

POLICIES = "/api/v1/policies"
CATEGORIES = "/api/v1/policy-categories"


@pytest.fixture
def hr_category(session):
    return policy_service.create_category(session, {"name": "Human Resources", "description": "People policies"})


def _policy(session, category, **overrides):
    data = {"title": "Leave Policy", "content": "<p>Annual leave is 21 days.</p>", "category_id": category.id}
    data.update(overrides)
    result = policy_service.create_policy(session, data)
    assert result.success
    return result.data


def test_categories_get_slugs_and_append_order(session, hr_category):
    safety = policy_service.create_category(session, {"name": "Health & Safety"})
    assert hr_category.slug == "human-resources"
    assert hr_category.color == "#d2ab67"
    assert (hr_category.order, safety.order) == (0, 1)
    assert safety.slug == "health-safety"


def test_reorder_categories_follows_list_position(client, session, admin_headers, hr_category):
    safety = policy_service.create_category(session, {"name": "Safety"})
    it = policy_service.create_category(session, {"name": "IT"})

    response = client.put(
        f"{CATEGORIES}/order",
        json={"ids": [str(it.id), str(hr_category.id), str(safety.id)]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["IT", "Human Resources", "Safety"]


def test_reorder_with_unknown_category_is_rejected(session, hr_category):
    result = policy_service.reorder_categories(session, [hr_category.id, uuid4()])
    assert result.reason == FailureReason.NOT_FOUND


def test_category_in_use_cannot_be_deleted(client, session, admin_headers, hr_category):
    _policy(session, hr_category)
    response = client.delete(f"{CATEGORIES}/{hr_category.id}", headers=admin_headers)
    assert response.status_code == 409
    assert "1 policies" in response.json()["detail"]


def test_inactive_categories_are_hidden_from_public_list(client, session, admin_headers, hr_category):
    policy_service.update_category(session, hr_category.id, {"is_active": False})
    assert client.get(f"{CATEGORIES}/").json() == []
    assert len(client.get(f"{CATEGORIES}/all", headers=admin_headers).json()) == 1


def test_policy_excerpt_and_first_publish_time(session, hr_category):
    policy = _policy(session, hr_category)
    assert policy.excerpt == "Annual leave is 21 days."
    assert policy.status == "draft"
    assert policy.published_at is None

    published = policy_service.toggle_status(session, policy.id)
    first_published = published.published_at
    assert published.status == "published"
    assert first_published is not None

    policy_service.toggle_status(session, policy.id)
    again = policy_service.toggle_status(session, policy.id)
    assert again.published_at == first_published


def test_policy_needs_an_existing_category(client, admin_headers):
    response = client.post(
        f"{POLICIES}/",
        json={"title": "Orphan", "category_id": str(uuid4())},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please select a valid category"


def test_create_policy_with_pdf_only(client, admin, admin_headers, hr_category):
    response = client.post(
        f"{POLICIES}/",
        json={
            "title": "Code of Conduct",
            "category_id": str(hr_category.id),
            "pdf_url": "/uploads/policies/code-of-conduct.pdf",
            "pdf_file_name": "code-of-conduct.pdf",
            "effective_date": "2024-01-01",
            "version": "2.1",
            "status": "published",
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "code-of-conduct"
    assert body["content"] == ""
    assert body["category"]["name"] == "Human Resources"
    assert body["published_at"] is not None


def test_public_list_shows_published_featured_first(client, session, hr_category):
    safety = policy_service.create_category(session, {"name": "Safety"})
    _policy(session, hr_category, title="Leave", status="published")
    _policy(session, hr_category, title="Overtime", status="published", is_featured=True)
    _policy(session, safety, title="PPE", status="published")
    _policy(session, hr_category, title="Unreleased", status="draft")

    body = client.get(f"{POLICIES}/").json()
    assert body["total"] == 3
    assert body["items"][0]["title"] == "Overtime"
    assert "Unreleased" not in [p["title"] for p in body["items"]]

    hr_only = client.get(f"{POLICIES}/", params={"category": "human-resources"}).json()
    assert {p["title"] for p in hr_only["items"]} == {"Leave", "Overtime"}

    searched = client.get(f"{POLICIES}/", params={"search": "ppe"}).json()
    assert [p["title"] for p in searched["items"]] == ["PPE"]

    assert client.get(f"{POLICIES}/", params={"category": "no-such-category"}).json()["total"] == 0


def test_slug_view_counts_and_hides_drafts(client, session, hr_category):
    _policy(session, hr_category, title="Leave", status="published")
    _policy(session, hr_category, title="Secret", status="draft")

    assert client.get(f"{POLICIES}/slug/leave").json()["views"] == 1
    assert client.get(f"{POLICIES}/slug/leave").json()["views"] == 2
    assert client.get(f"{POLICIES}/slug/secret").status_code == 404


def test_concurrent_views_are_all_counted(file_engine):
    with Session(file_engine) as session:
        category = policy_service.create_category(session, {"name": "HR"})
        _policy(session, category, title="Leave", status="published")

    def view():
        with Session(file_engine) as session:
            return policy_service.get_policy_by_slug(session, "leave", count_view=True) is not None

    assert run_concurrently(view, count=4) == [True] * 4
    with Session(file_engine) as session:
        assert policy_service.get_policy_by_slug(session, "leave").views == 4


def test_admin_listing_toggles_and_stats(client, session, admin_headers, hr_category):
    leave = _policy(session, hr_category, title="Leave", status="published")
    _policy(session, hr_category, title="Draft One")
    _policy(session, hr_category, title="Old", status="archived")

    listing = client.get(f"{POLICIES}/admin", params={"status": "draft"}, headers=admin_headers).json()
    assert [p["title"] for p in listing["items"]] == ["Draft One"]

    stats = client.get(f"{POLICIES}/stats", headers=admin_headers).json()
    assert stats == {"total": 3, "draft": 1, "published": 1, "archived": 1}

    featured = client.post(f"{POLICIES}/{leave.id}/toggle-featured", headers=admin_headers).json()
    assert featured["is_featured"] is True
    toggled = client.post(f"{POLICIES}/{leave.id}/toggle-status", headers=admin_headers).json()
    assert toggled["status"] == "draft"


def test_update_and_delete_policy(client, session, admin, admin_headers, hr_category):
    policy = _policy(session, hr_category)

    response = client.patch(
        f"{POLICIES}/{policy.id}",
        json={"title": "Leave and Absence", "content": "<p>Sick leave needs a note.</p>"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["slug"] == "leave-and-absence"
    assert body["excerpt"] == "Sick leave needs a note."
    session.expire_all()
    assert session.get(Policy, policy.id).updated_by == admin.id

    assert client.delete(f"{POLICIES}/{policy.id}", headers=admin_headers).status_code == 204
    assert client.get(f"{POLICIES}/{policy.id}", headers=admin_headers).status_code == 404


def test_policy_admin_routes_need_admin(client, hr_category):
    assert client.get(f"{POLICIES}/admin").status_code == 401
    assert client.get(f"{POLICIES}/stats").status_code == 401
    assert client.post(f"{POLICIES}/", json={"title": "x", "category_id": str(hr_category.id)}).status_code == 401
