from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from intranet.models import News
from intranet.models.news import ContentStatus
from intranet.services.slugs import make_excerpt, unique_slug

logger = logging.getLogger(__name__)


def _apply_publish_state(news: News) -> None:
    # published_at is set once, on the first publish
    if news.status == ContentStatus.PUBLISHED and news.published_at is None:
        news.published_at = datetime.utcnow()


def create_news(session: Session, data: dict[str, Any], created_by: Optional[UUID] = None) -> News:
    data = dict(data)
    if not data.get("excerpt"):
        data["excerpt"] = make_excerpt(data["content"])
    news = News(**data, slug=unique_slug(session, News, data["title"]), created_by=created_by)
    _apply_publish_state(news)
    session.add(news)
    session.commit()
    session.refresh(news)
    logger.info("News %s created (status=%s)", news.slug, news.status)
    return news


def update_news(session: Session, news_id: UUID, data: dict[str, Any]) -> Optional[News]:
    news = session.get(News, news_id)
    if news is None:
        return None

    title_changed = "title" in data and data["title"] != news.title
    for key, value in data.items():
        setattr(news, key, value)
    if title_changed:
        news.slug = unique_slug(session, News, news.title, exclude_id=news.id)
    if not news.excerpt or ("content" in data and "excerpt" not in data):
        news.excerpt = make_excerpt(news.content)
    _apply_publish_state(news)
    news.touch()

    session.add(news)
    session.commit()
    session.refresh(news)
    return news


def delete_news(session: Session, news_id: UUID) -> bool:
    news = session.get(News, news_id)
    if news is None:
        return False
    session.delete(news)
    session.commit()
    return True


def get_news(session: Session, news_id: UUID) -> Optional[News]:
    return session.get(News, news_id)


def get_news_by_slug(
    session: Session,
    slug: str,
    count_view: bool = False,
    published_only: bool = False,
) -> Optional[News]:
    statement = select(News).where(News.slug == slug.lower())
    if published_only:
        statement = statement.where(News.status == ContentStatus.PUBLISHED)
    news = session.exec(statement).first()
    if news is not None and count_view:
        # Incremented in SQL, not in Python
        session.execute(update(News).where(News.id == news.id).values(view_count=News.view_count + 1))
        session.commit()
        session.refresh(news)
    return news


def list_news(
    session: Session,
    *,
    status: Optional[str] = ContentStatus.PUBLISHED,
    category: Optional[str] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[News], int]:
    filters = []
    if status:
        filters.append(News.status == status)
    if category:
        filters.append(News.category == category)
    if featured is not None:
        filters.append(News.is_featured == featured)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(News.title.ilike(pattern), News.excerpt.ilike(pattern), News.content.ilike(pattern))
        )

    total = session.exec(select(func.count()).select_from(News).where(*filters)).one()
    statement = (
        select(News)
        .where(*filters)
        .order_by(News.published_at.desc(), News.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(session.exec(statement).all()), total


def get_featured_news(session: Session, limit: int = 5) -> list[News]:
    statement = (
        select(News)
        .where(News.status == ContentStatus.PUBLISHED, News.is_featured == True)  # noqa: E712
        .order_by(News.published_at.desc())
        .limit(limit)
    )
    return list(session.exec(statement).all())


def serialize_news(news: News) -> dict[str, Any]:
    return {
        "id": news.id,
        "title": news.title,
        "slug": news.slug,
        "excerpt": news.excerpt,
        "content": news.content,
        "category": news.category,
        "author_name": news.author_name,
        "images": news.images or [],
        "featured_image": news.featured_image,
        "is_featured": news.is_featured,
        "status": news.status,
        "published_at": news.published_at,
        "view_count": news.view_count,
        "tags": news.tags or [],
        "created_at": news.created_at,
        "updated_at": news.updated_at,
    }
