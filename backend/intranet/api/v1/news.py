from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin, PushServiceDep
from intranet.db import SessionDep
from intranet.models.news import ContentStatus
from intranet.schemas import NewsCreate, NewsRead, NewsUpdate, PaginatedResponse
from intranet.services import news as news_service
from intranet.services.notifications import announce
from intranet.services.web_push import PushPayload

router = APIRouter()


def _announce_news(background_tasks, push_service, session, news) -> None:
    announce(
        background_tasks,
        push_service,
        session,
        PushPayload(title=news.title, body=news.excerpt or "New company news", url=f"/news/{news.slug}"),
    )


@router.get("/", response_model=PaginatedResponse[NewsRead])
def list_news(
    session: SessionDep,
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    featured: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
) -> PaginatedResponse[NewsRead]:
    """Published news, newest first."""
    items, total = news_service.list_news(
        session,
        category=category,
        search=search,
        featured=featured,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create(
        [NewsRead.model_validate(news_service.serialize_news(n)) for n in items], total, page, page_size
    )


@router.get("/admin", response_model=PaginatedResponse[NewsRead])
def list_news_admin(
    session: SessionDep,
    current_admin: CurrentAdmin,
    status_filter: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[NewsRead]:
    """All news regardless of status."""
    items, total = news_service.list_news(
        session,
        status=status_filter,
        category=category,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create(
        [NewsRead.model_validate(news_service.serialize_news(n)) for n in items], total, page, page_size
    )


@router.get("/featured", response_model=list[NewsRead])
def featured_news(session: SessionDep, limit: int = Query(5, ge=1, le=20)) -> list[NewsRead]:
    return [NewsRead.model_validate(news_service.serialize_news(n)) for n in news_service.get_featured_news(session, limit)]


@router.get("/slug/{slug}", response_model=NewsRead)
def read_news_by_slug(slug: str, session: SessionDep) -> NewsRead:
    news = news_service.get_news_by_slug(session, slug, count_view=True, published_only=True)
    if news is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return NewsRead.model_validate(news_service.serialize_news(news))


@router.get("/{news_id}", response_model=NewsRead)
def read_news(news_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> NewsRead:
    news = news_service.get_news(session, news_id)
    if news is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    return NewsRead.model_validate(news_service.serialize_news(news))


@router.post("/", response_model=NewsRead, status_code=status.HTTP_201_CREATED)
def create_news(
    payload: NewsCreate,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> NewsRead:
    news = news_service.create_news(session, payload.model_dump(), created_by=current_admin.id)
    if news.status == ContentStatus.PUBLISHED:
        _announce_news(background_tasks, push_service, session, news)
    return NewsRead.model_validate(news_service.serialize_news(news))


@router.patch("/{news_id}", response_model=NewsRead)
def update_news(
    news_id: UUID,
    payload: NewsUpdate,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> NewsRead:
    existing = news_service.get_news(session, news_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
    was_published = existing.published_at is not None

    news = news_service.update_news(session, news_id, payload.model_dump(exclude_unset=True))
    if not was_published and news.status == ContentStatus.PUBLISHED:
        _announce_news(background_tasks, push_service, session, news)
    return NewsRead.model_validate(news_service.serialize_news(news))


@router.delete("/{news_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_news(news_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not news_service.delete_news(session, news_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="News not found")
