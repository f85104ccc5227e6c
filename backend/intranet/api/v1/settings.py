from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, status

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import PublicSettings, SettingsUpdate
from intranet.services import settings as settings_service

router = APIRouter()


@router.get("/public", response_model=PublicSettings)
def read_public_settings(session: SessionDep) -> PublicSettings:
    """Settings the portal needs before sign-in (site name, maintenance state)."""
    return PublicSettings(**settings_service.get_public_settings(session))


@router.get("/")
def read_settings(session: SessionDep, current_admin: CurrentAdmin) -> dict[str, list[dict[str, Any]]]:
    return settings_service.get_settings_for_admin(session)


@router.put("/")
def update_settings(
    payload: SettingsUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> dict[str, Any]:
    try:
        values = settings_service.update_settings(session, payload.settings, updated_by=current_admin.id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    return {"message": "Settings saved", "settings": values}
