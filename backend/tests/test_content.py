from datetime import date, timedelta

import pytest
from sqlmodel import Session

from conftest import run_concurrently
from intranet.models import News, ToolboxTalk
from intranet.services import news as news_service
from intranet.services import toolbox_talks
from intranet.services.slugs import make_excerpt, slugify, unique_slug

NEWS = "/api/v1/news"
TALKS = "/api/v1/toolbox-talks"


def test_slugify():
    assert slugify("Safety First: Q3 Update!") == "safety-first-q3-update"
    assert slugify("  Many   spaces__here ") == "many-spaces-here"
    assert len(slugify("x" * 300)) == 100


def test_duplicate_titles_get_numbered_slugs(session):
    first = news_service.create_news(session, {"title": "Plant Shutdown", "content": "<p>Monday</p>"})
    second = news_service.create_news(session, {"title": "Plant Shutdown", "content": "<p>Tuesday</p>"})
    third = news_service.create_news(session, {"title": "Plant shutdown!", "content": "<p>Wednesday</p>"})
    assert [first.slug, second.slug, third.slug] == ["plant-shutdown", "plant-shutdown-2", "plant-shutdown-3"]
    # A row keeps its own slug when re-checked
    assert unique_slug(session, News, "Plant Shutdown", exclude_id=first.id) == "plant-shutdown"


def test_make_excerpt_strips_html_and_cuts_on_words():
    content = "<p>" + "word " * 100 + "</p>"
    excerpt = make_excerpt(content, 50)
    assert excerpt.endswith("...")
    assert "<" not in excerpt
    assert len(excerpt) <= 53
    assert make_excerpt("<b>Short</b> &amp; sweet") == "Short & sweet"


@pytest.mark.parametrize(
    "day, expected",
    [(1, 1), (7, 1), (8, 2), (14, 2), (15, 3), (21, 3), (22, 4), (28, 4), (29, 5), (31, 5)],
)
def test_week_of_month(day, expected):
    assert toolbox_talks.week_of_month(date(2024, 3, day)) == expected


def test_publishing_news_sets_published_at_once(session):
    news = news_service.create_news(session, {"title": "Draft", "content": "text"})
    assert news.published_at is None

    published = news_service.update_news(session, news.id, {"status": "published"})
    first_published_at = published.published_at
    assert first_published_at is not None

    news_service.update_news(session, news.id, {"status": "archived"})
    again = news_service.update_news(session, news.id, {"status": "published"})
    assert again.published_at == first_published_at


def test_public_news_list_hides_drafts(client, session):
    news_service.create_news(session, {"title": "Visible", "content": "a", "status": "published"})
    news_service.create_news(session, {"title": "Hidden", "content": "b"})

    response = client.get(f"{NEWS}/")
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["items"][0]["title"] == "Visible"

    assert client.get(f"{NEWS}/slug/hidden").status_code == 404


def test_news_slug_read_counts_views(client, session):
    news_service.create_news(session, {"title": "Quarterly Results", "content": "a", "status": "published"})
    client.get(f"{NEWS}/slug/quarterly-results")
    response = client.get(f"{NEWS}/slug/quarterly-results")
    assert response.json()["view_count"] == 2


def test_concurrent_news_reads_count_every_view(file_engine):
    with Session(file_engine) as session:
        news_service.create_news(session, {"title": "Quarterly Results", "content": "a", "status": "published"})

    def read():
        with Session(file_engine) as session:
            return news_service.get_news_by_slug(session, "quarterly-results", count_view=True) is not None

    assert run_concurrently(read, count=4) == [True] * 4
    with Session(file_engine) as session:
        assert news_service.get_news_by_slug(session, "quarterly-results").view_count == 4


def test_news_search(client, session):
    news_service.create_news(session, {"title": "Fire drill", "content": "Assemble at gate 3", "status": "published"})
    news_service.create_news(session, {"title": "Canteen menu", "content": "Jollof on Friday", "status": "published"})
    body = client.get(f"{NEWS}/", params={"search": "jollof"}).json()
    assert [item["title"] for item in body["items"]] == ["Canteen menu"]


def test_admin_news_crud_announces_first_publish(client, admin_headers, push_service, fake_sender, session):
    from intranet.services.web_push import save_subscription

    save_subscription(session, "https://push.example/1", {"p256dh": "k", "auth": "a"})

    created = client.post(
        f"{NEWS}/",
        json={"title": "New PPE policy", "content": "<p>Hard hats everywhere</p>", "category": "safety"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    news_id = created.json()["id"]
    assert created.json()["excerpt"] == "Hard hats everywhere"
    assert fake_sender.sent == []

    published = client.patch(f"{NEWS}/{news_id}", json={"status": "published"}, headers=admin_headers)
    assert published.status_code == 200
    assert len(fake_sender.sent) == 1

    # Editing a published article does not notify again
    client.patch(f"{NEWS}/{news_id}", json={"title": "PPE policy v2"}, headers=admin_headers)
    assert len(fake_sender.sent) == 1

    assert client.delete(f"{NEWS}/{news_id}", headers=admin_headers).status_code == 204
    assert client.get(f"{NEWS}/{news_id}", headers=admin_headers).status_code == 404


def test_news_writes_require_admin(client, user_headers):
    response = client.post(f"{NEWS}/", json={"title": "x", "content": "y"}, headers=user_headers)
    assert response.status_code == 401


def test_disabled_push_setting_suppresses_announcements(client, admin_headers, push_service, fake_sender, session):
    from intranet.services.settings import update_settings
    from intranet.services.web_push import save_subscription

    save_subscription(session, "https://push.example/1", {"p256dh": "k", "auth": "a"})
    update_settings(session, {"enablePushNotifications": False})

    response = client.post(
        f"{NEWS}/",
        json={"title": "Quiet news", "content": "text", "status": "published"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert fake_sender.sent == []


def _talk(session, title, scheduled, status="published"):
    return toolbox_talks.create_talk(
        session,
        {"title": title, "content": "Talk content", "scheduled_date": scheduled, "status": status},
    )


def test_create_talk_derives_schedule_fields(session):
    talk = _talk(session, "Working at height", date(2024, 5, 16))
    assert (talk.week, talk.month, talk.year) == (3, 5, 2024)

    moved = toolbox_talks.update_talk(session, talk.id, {"scheduled_date": date(2024, 6, 2)})
    assert (moved.week, moved.month, moved.year) == (1, 6, 2024)


def test_todays_and_this_weeks_talk(session):
    today = date(2024, 5, 16)
    _talk(session, "Today", today)
    _talk(session, "Draft today", today, status="draft")

    assert toolbox_talks.get_todays_talk(session, today).title == "Today"
    assert toolbox_talks.get_this_weeks_talk(session, today).title == "Today"
    assert toolbox_talks.get_todays_talk(session, today + timedelta(days=1)) is None


def test_this_weeks_talk_falls_back_to_calendar_week(session):
    # Monday 29 April is week 5 of April, Wednesday 1 May is week 1 of May
    _talk(session, "Month boundary", date(2024, 4, 29))
    found = toolbox_talks.get_this_weeks_talk(session, date(2024, 5, 1))
    assert found is not None
    assert found.title == "Month boundary"


def test_week_info_endpoint(client):
    body = client.get(f"{TALKS}/week-info").json()
    today = date.today()
    assert body["week"] == toolbox_talks.week_of_month(today)
    assert body["month"] == today.month


def test_talk_slug_endpoint_counts_views_and_hides_drafts(client, session):
    _talk(session, "Lockout tagout", date.today())
    _talk(session, "Unreleased", date.today(), status="draft")

    first = client.get(f"{TALKS}/slug/lockout-tagout")
    assert first.status_code == 200
    assert client.get(f"{TALKS}/slug/lockout-tagout").json()["views"] == 2
    assert client.get(f"{TALKS}/slug/unreleased").status_code == 404


def test_admin_creates_talk_with_media(client, admin_headers):
    response = client.post(
        f"{TALKS}/",
        json={
            "title": "Hearing protection",
            "content": "<p>Wear plugs</p>",
            "scheduled_date": "2024-07-08",
            "media": [{"type": "video", "url": "https://cdn.example/ear.mp4"}],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201, response.text
    body = response.json()
    assert body["week"] == 2
    assert body["media"][0]["type"] == "video"


def test_talk_archive_groups_by_month(client, session):
    _talk(session, "March talk", date(2024, 3, 4))
    _talk(session, "March talk two", date(2024, 3, 11))
    _talk(session, "April talk", date(2024, 4, 1))
    archive = client.get(f"{TALKS}/archive").json()
    counts = {(row["year"], row["month"]): row["count"] for row in archive}
    assert counts[(2024, 3)] == 2
    assert counts[(2024, 4)] == 1


def test_talk_rows_are_toolbox_talks(session):
    talk = _talk(session, "Type check", date(2024, 1, 1))
    assert isinstance(session.get(ToolboxTalk, talk.id), ToolboxTalk)
