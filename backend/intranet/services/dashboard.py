"""Back-office dashboard counters."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from intranet.models import AppLink, Contact, News, Policy, PushSubscription, Suggestion, ToolboxTalk, User
from intranet.models.news import ContentStatus
from intranet.models.suggestion import SuggestionStatus

ACTIVITY_DAYS = 7


def _count(session: Session, model, *filters) -> int:
    return session.exec(select(func.count()).select_from(model).where(*filters)).one()


def _status_counts(session: Session, model) -> dict[str, int]:
    rows = session.exec(select(model.status, func.count()).group_by(model.status)).all()
    counts = {status: 0 for status in ContentStatus.ALL}
    counts.update({status: count for status, count in rows})
    return counts


def _daily_counts(session: Session, model, since: datetime) -> dict[date, int]:
    created = session.exec(select(model.created_at).where(model.created_at >= since)).all()
    counts: dict[date, int] = {}
    for value in created:
        counts[value.date()] = counts.get(value.date(), 0) + 1
    return counts


def get_dashboard(session: Session, today: date | None = None) -> dict[str, Any]:
    today = today or datetime.utcnow().date()
    news_status = _status_counts(session, News)
    talk_status = _status_counts(session, ToolboxTalk)

    counts = {
        "published_news": news_status[ContentStatus.PUBLISHED],
        "draft_news": news_status[ContentStatus.DRAFT],
        "published_talks": talk_status[ContentStatus.PUBLISHED],
        "draft_talks": talk_status[ContentStatus.DRAFT],
        "active_contacts": _count(session, Contact, Contact.is_active == True),  # noqa: E712
        "active_apps": _count(session, AppLink, AppLink.is_active == True),  # noqa: E712
        "portal_users": _count(session, User),
        "push_subscribers": _count(session, PushSubscription),
        "new_suggestions": _count(session, Suggestion, Suggestion.status == SuggestionStatus.NEW),
    }

    content_status = [
        {"name": "News", **news_status},
        {"name": "Toolbox Talks", **talk_status},
        {"name": "Policies", **_status_counts(session, Policy)},
    ]

    first_day = today - timedelta(days=ACTIVITY_DAYS - 1)
    since = datetime.combine(first_day, time.min)
    news_daily = _daily_counts(session, News, since)
    suggestion_daily = _daily_counts(session, Suggestion, since)
    activity = []
    for offset in range(ACTIVITY_DAYS):
        day = first_day + timedelta(days=offset)
        activity.append(
            {
                "date": day.isoformat(),
                "news": news_daily.get(day, 0),
                "suggestions": suggestion_daily.get(day, 0),
            }
        )

    return {"counts": counts, "content_status": content_status, "activity": activity}
