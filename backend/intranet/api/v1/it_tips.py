from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import ITTipCreate, ITTipRead, ITTipUpdate
from intranet.services import it_tips

router = APIRouter()


@router.get("/", response_model=list[ITTipRead])
def list_tips(
    session: SessionDep,
    category: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=100),
) -> list[ITTipRead]:
    """Active tips, pinned first."""
    return [ITTipRead.model_validate(t) for t in it_tips.list_tips(session, category=category, limit=limit)]


@router.get("/all", response_model=list[ITTipRead])
def list_all_tips(session: SessionDep, current_admin: CurrentAdmin) -> list[ITTipRead]:
    return [ITTipRead.model_validate(t) for t in it_tips.list_tips(session, active_only=False)]


@router.post("/", response_model=ITTipRead, status_code=status.HTTP_201_CREATED)
def create_tip(payload: ITTipCreate, session: SessionDep, current_admin: CurrentAdmin) -> ITTipRead:
    return ITTipRead.model_validate(it_tips.create_tip(session, payload.model_dump()))


@router.patch("/{tip_id}", response_model=ITTipRead)
def update_tip(tip_id: UUID, payload: ITTipUpdate, session: SessionDep, current_admin: CurrentAdmin) -> ITTipRead:
    tip = it_tips.update_tip(session, tip_id, payload.model_dump(exclude_unset=True))
    if tip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="IT tip not found")
    return ITTipRead.model_validate(tip)


@router.delete("/{tip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tip(tip_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not it_tips.delete_tip(session, tip_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="IT tip not found")
