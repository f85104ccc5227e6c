from __future__ import annotations

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin, PushServiceDep
from intranet.db import SessionDep
from intranet.models.news import ContentStatus
from intranet.schemas import PaginatedResponse, ToolboxTalkCreate, ToolboxTalkRead, ToolboxTalkUpdate
from intranet.schemas.toolbox_talk import ArchiveMonth, WeekInfo
from intranet.services import toolbox_talks as talk_service
from intranet.services.notifications import announce
from intranet.services.web_push import PushPayload

router = APIRouter()


def _read(talk) -> ToolboxTalkRead:
    return ToolboxTalkRead.model_validate(talk_service.serialize_talk(talk))


def _announce_talk(background_tasks, push_service, session, talk) -> None:
    announce(
        background_tasks,
        push_service,
        session,
        PushPayload(
            title=f"Toolbox Talk: {talk.title}",
            body=talk.summary or "A new toolbox talk is available",
            url=f"/toolbox-talk/{talk.slug}",
        ),
    )


@router.get("/", response_model=PaginatedResponse[ToolboxTalkRead])
def list_talks(
    session: SessionDep,
    week: Optional[int] = Query(None, ge=1, le=5),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    tags: Optional[list[str]] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[ToolboxTalkRead]:
    """Published talks, latest schedule first."""
    items, total = talk_service.list_talks(
        session,
        week=week,
        month=month,
        year=year,
        start_date=start_date,
        end_date=end_date,
        tags=tags,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create([_read(t) for t in items], total, page, page_size)


@router.get("/admin", response_model=PaginatedResponse[ToolboxTalkRead])
def list_talks_admin(
    session: SessionDep,
    current_admin: CurrentAdmin,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[ToolboxTalkRead]:
    items, total = talk_service.list_talks(
        session,
        status=status_filter,
        include_all=True,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create([_read(t) for t in items], total, page, page_size)


@router.get("/today", response_model=Optional[ToolboxTalkRead])
def todays_talk(session: SessionDep) -> Optional[ToolboxTalkRead]:
    talk = talk_service.get_todays_talk(session)
    return _read(talk) if talk else None


@router.get("/this-week", response_model=Optional[ToolboxTalkRead])
def this_weeks_talk(session: SessionDep) -> Optional[ToolboxTalkRead]:
    talk = talk_service.get_this_weeks_talk(session)
    return _read(talk) if talk else None


@router.get("/week-info", response_model=WeekInfo)
def current_week_info() -> WeekInfo:
    return WeekInfo(**talk_service.get_current_week_info())


@router.get("/upcoming", response_model=list[ToolboxTalkRead])
def upcoming_talks(session: SessionDep, limit: int = Query(7, ge=1, le=30)) -> list[ToolboxTalkRead]:
    return [_read(t) for t in talk_service.get_upcoming_talks(session, limit)]


@router.get("/archive", response_model=list[ArchiveMonth])
def archive_months(session: SessionDep) -> list[ArchiveMonth]:
    return [ArchiveMonth(**row) for row in talk_service.get_archive_months(session)]


@router.get("/slug/{slug}", response_model=ToolboxTalkRead)
def read_talk_by_slug(slug: str, session: SessionDep) -> ToolboxTalkRead:
    talk = talk_service.get_talk_by_slug(session, slug)
    if talk is None or talk.status != ContentStatus.PUBLISHED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Toolbox talk not found")
    talk_service.record_view(session, talk)
    return _read(talk)


@router.get("/{talk_id}", response_model=ToolboxTalkRead)
def read_talk(talk_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> ToolboxTalkRead:
    talk = talk_service.get_talk(session, talk_id)
    if talk is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Toolbox talk not found")
    return _read(talk)


@router.post("/", response_model=ToolboxTalkRead, status_code=status.HTTP_201_CREATED)
def create_talk(
    payload: ToolboxTalkCreate,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> ToolboxTalkRead:
    talk = talk_service.create_talk(session, payload.model_dump(), created_by=current_admin.id)
    if talk.status == ContentStatus.PUBLISHED:
        _announce_talk(background_tasks, push_service, session, talk)
    return _read(talk)


@router.patch("/{talk_id}", response_model=ToolboxTalkRead)
def update_talk(
    talk_id: UUID,
    payload: ToolboxTalkUpdate,
    session: SessionDep,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> ToolboxTalkRead:
    existing = talk_service.get_talk(session, talk_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Toolbox talk not found")
    previous_status = existing.status

    talk = talk_service.update_talk(session, talk_id, payload.model_dump(exclude_unset=True))
    if previous_status != ContentStatus.PUBLISHED and talk.status == ContentStatus.PUBLISHED:
        _announce_talk(background_tasks, push_service, session, talk)
    return _read(talk)


@router.delete("/{talk_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_talk(talk_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not talk_service.delete_talk(session, talk_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Toolbox talk not found")
