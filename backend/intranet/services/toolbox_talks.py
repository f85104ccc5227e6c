"""Weekly safety talks (toolbox talks)."""

from __future__ import annotations

import calendar
import logging
import math
from datetime import date, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from intranet.models import ToolboxTalk
from intranet.models.news import ContentStatus
from intranet.services.slugs import unique_slug

logger = logging.getLogger(__name__)


def week_of_month(day: date) -> int:
    """1 for days 1-7, 2 for 8-14 ... 5 for 29-31."""
    return math.ceil(day.day / 7)


def _apply_schedule(talk: ToolboxTalk) -> None:
    talk.week = week_of_month(talk.scheduled_date)
    talk.month = talk.scheduled_date.month
    talk.year = talk.scheduled_date.year


def create_talk(session: Session, data: dict[str, Any], created_by: Optional[UUID] = None) -> ToolboxTalk:
    talk = ToolboxTalk(
        **data,
        slug=unique_slug(session, ToolboxTalk, data["title"]),
        week=week_of_month(data["scheduled_date"]),
        month=data["scheduled_date"].month,
        year=data["scheduled_date"].year,
        created_by=created_by,
    )
    session.add(talk)
    session.commit()
    session.refresh(talk)
    logger.info("Toolbox talk %s scheduled for %s", talk.slug, talk.scheduled_date)
    return talk


def update_talk(session: Session, talk_id: UUID, data: dict[str, Any]) -> Optional[ToolboxTalk]:
    talk = session.get(ToolboxTalk, talk_id)
    if talk is None:
        return None

    title_changed = "title" in data and data["title"] != talk.title
    for key, value in data.items():
        setattr(talk, key, value)
    if title_changed:
        talk.slug = unique_slug(session, ToolboxTalk, talk.title, exclude_id=talk.id)
    if "scheduled_date" in data:
        _apply_schedule(talk)
    talk.touch()

    session.add(talk)
    session.commit()
    session.refresh(talk)
    return talk


def delete_talk(session: Session, talk_id: UUID) -> bool:
    talk = session.get(ToolboxTalk, talk_id)
    if talk is None:
        return False
    session.delete(talk)
    session.commit()
    return True


def get_talk(session: Session, talk_id: UUID) -> Optional[ToolboxTalk]:
    return session.get(ToolboxTalk, talk_id)


def get_talk_by_slug(session: Session, slug: str) -> Optional[ToolboxTalk]:
    return session.exec(select(ToolboxTalk).where(ToolboxTalk.slug == slug.lower())).first()


def record_view(session: Session, talk: ToolboxTalk) -> None:
    session.execute(update(ToolboxTalk).where(ToolboxTalk.id == talk.id).values(views=ToolboxTalk.views + 1))
    session.commit()
    session.refresh(talk)


def get_todays_talk(session: Session, today: Optional[date] = None) -> Optional[ToolboxTalk]:
    today = today or date.today()
    statement = select(ToolboxTalk).where(
        ToolboxTalk.status == ContentStatus.PUBLISHED,
        ToolboxTalk.scheduled_date == today,
    )
    return session.exec(statement).first()


def get_this_weeks_talk(session: Session, today: Optional[date] = None) -> Optional[ToolboxTalk]:
    """Published talk for the current week of the month.

    Talks without a matching week/month/year fall back to a scheduled date
    inside the current Monday-Sunday week.
    """
    today = today or date.today()
    talk = session.exec(
        select(ToolboxTalk).where(
            ToolboxTalk.status == ContentStatus.PUBLISHED,
            ToolboxTalk.week == week_of_month(today),
            ToolboxTalk.month == today.month,
            ToolboxTalk.year == today.year,
        )
    ).first()
    if talk is not None:
        return talk

    week_start = today - timedelta(days=today.weekday())
    week_end = week_start + timedelta(days=7)
    statement = (
        select(ToolboxTalk)
        .where(
            ToolboxTalk.status == ContentStatus.PUBLISHED,
            ToolboxTalk.scheduled_date >= week_start,
            ToolboxTalk.scheduled_date < week_end,
        )
        .order_by(ToolboxTalk.scheduled_date.desc())
    )
    return session.exec(statement).first()


def get_current_week_info(today: Optional[date] = None) -> dict[str, Any]:
    today = today or date.today()
    return {
        "week": week_of_month(today),
        "month": today.month,
        "year": today.year,
        "month_name": calendar.month_name[today.month],
    }


def list_talks(
    session: Session,
    *,
    status: Optional[str] = None,
    include_all: bool = False,
    week: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    tags: Optional[list[str]] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[ToolboxTalk], int]:
    filters = []
    if not include_all:
        filters.append(ToolboxTalk.status == (status or ContentStatus.PUBLISHED))
    elif status:
        filters.append(ToolboxTalk.status == status)
    if year:
        filters.append(ToolboxTalk.year == year)
    if month:
        filters.append(ToolboxTalk.month == month)
    if week:
        filters.append(ToolboxTalk.week == week)
    if start_date:
        filters.append(ToolboxTalk.scheduled_date >= start_date)
    if end_date:
        filters.append(ToolboxTalk.scheduled_date <= end_date)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                ToolboxTalk.title.ilike(pattern),
                ToolboxTalk.content.ilike(pattern),
                ToolboxTalk.summary.ilike(pattern),
            )
        )

    statement = select(ToolboxTalk).where(*filters).order_by(
        ToolboxTalk.year.desc(),
        ToolboxTalk.month.desc(),
        ToolboxTalk.week.desc(),
        ToolboxTalk.scheduled_date.desc(),
    )

    if tags:
        # Tags live in a JSON column, filter in Python
        wanted = set(tags)
        talks = [t for t in session.exec(statement).all() if wanted & set(t.tags or [])]
        return talks[skip : skip + limit], len(talks)

    total = session.exec(select(func.count()).select_from(ToolboxTalk).where(*filters)).one()
    return list(session.exec(statement.offset(skip).limit(limit)).all()), total


def get_archive_months(session: Session) -> list[dict[str, Any]]:
    statement = (
        select(ToolboxTalk.year, ToolboxTalk.month, func.count())
        .where(ToolboxTalk.status == ContentStatus.PUBLISHED)
        .group_by(ToolboxTalk.year, ToolboxTalk.month)
        .order_by(ToolboxTalk.year.desc(), ToolboxTalk.month.desc())
    )
    return [
        {"year": year, "month": month, "month_name": calendar.month_name[month], "count": count}
        for year, month, count in session.exec(statement).all()
    ]


def get_upcoming_talks(session: Session, limit: int = 7, today: Optional[date] = None) -> list[ToolboxTalk]:
    today = today or date.today()
    statement = (
        select(ToolboxTalk)
        .where(ToolboxTalk.status == ContentStatus.PUBLISHED, ToolboxTalk.scheduled_date >= today)
        .order_by(ToolboxTalk.scheduled_date)
        .limit(limit)
    )
    return list(session.exec(statement).all())


def serialize_talk(talk: ToolboxTalk) -> dict[str, Any]:
    return {
        "id": talk.id,
        "title": talk.title,
        "slug": talk.slug,
        "content": talk.content,
        "summary": talk.summary,
        "author_name": talk.author_name,
        "media": talk.media or [],
        "featured_media": talk.featured_media,
        "scheduled_date": talk.scheduled_date,
        "week": talk.week,
        "month": talk.month,
        "year": talk.year,
        "status": talk.status,
        "tags": talk.tags or [],
        "views": talk.views,
        "created_at": talk.created_at,
        "updated_at": talk.updated_at,
    }
