from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import AppLinkCreate, AppLinkRead, AppLinkUpdate
from intranet.services import app_links

router = APIRouter()


@router.get("/", response_model=list[AppLinkRead])
def list_app_links(session: SessionDep) -> list[AppLinkRead]:
    return [AppLinkRead.model_validate(link) for link in app_links.list_app_links(session)]


@router.get("/all", response_model=list[AppLinkRead])
def list_all_app_links(session: SessionDep, current_admin: CurrentAdmin) -> list[AppLinkRead]:
    return [AppLinkRead.model_validate(link) for link in app_links.list_app_links(session, active_only=False)]


@router.post("/{link_id}/click", status_code=status.HTTP_204_NO_CONTENT)
def record_click(link_id: UUID, session: SessionDep) -> None:
    if not app_links.record_click(session, link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="App link not found")


@router.post("/", response_model=AppLinkRead, status_code=status.HTTP_201_CREATED)
def create_app_link(payload: AppLinkCreate, session: SessionDep, current_admin: CurrentAdmin) -> AppLinkRead:
    return AppLinkRead.model_validate(app_links.create_app_link(session, payload.model_dump()))


@router.patch("/{link_id}", response_model=AppLinkRead)
def update_app_link(
    link_id: UUID,
    payload: AppLinkUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> AppLinkRead:
    link = app_links.update_app_link(session, link_id, payload.model_dump(exclude_unset=True))
    if link is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="App link not found")
    return AppLinkRead.model_validate(link)


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_app_link(link_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not app_links.delete_app_link(session, link_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="App link not found")
