import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Request, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.core.config import settings
from intranet.core.limiter import limiter
from intranet.core.security import create_admin_token
from intranet.db import SessionDep
from intranet.models import User
from intranet.schemas import (
    AdminLogin,
    AdminRead,
    AdminToken,
    DashboardRead,
    PaginatedResponse,
    UserCreate,
    UserRead,
    UserUpdate,
)
from intranet.services import admin_users, dashboard, tokens

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=AdminToken, summary="Back-office sign-in")
@limiter.limit(settings.ADMIN_LOGIN_RATE_LIMIT)
def admin_login(request: Request, payload: AdminLogin, session: SessionDep) -> AdminToken:
    admin = admin_users.authenticate_admin(session, payload.email, payload.password)
    if admin is None:
        logger.warning("Failed admin login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    issued = create_admin_token(admin.id, {"email": admin.email, "role": admin.role})
    return AdminToken(
        access_token=issued.token,
        expires_in=settings.ADMIN_TOKEN_EXPIRE_HOURS * 3600,
        admin=AdminRead.model_validate(admin),
    )


@router.get("/me", response_model=AdminRead)
def read_admin_me(current_admin: CurrentAdmin) -> AdminRead:
    return AdminRead.model_validate(current_admin)


@router.get("/dashboard", response_model=DashboardRead)
def read_dashboard(session: SessionDep, current_admin: CurrentAdmin) -> DashboardRead:
    return DashboardRead(**dashboard.get_dashboard(session))


# === PORTAL USERS ===


@router.get("/users", response_model=PaginatedResponse[UserRead])
def list_users(
    session: SessionDep,
    current_admin: CurrentAdmin,
    search: Optional[str] = Query(None, max_length=100),
    role: Optional[str] = Query(None),
    department_id: Optional[UUID] = Query(None),
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[UserRead]:
    items, total = admin_users.list_users(
        session,
        search=search,
        role=role,
        department_id=department_id,
        is_active=is_active,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return PaginatedResponse.create([UserRead.model_validate(u) for u in items], total, page, page_size)


@router.post("/users", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, session: SessionDep, current_admin: CurrentAdmin) -> UserRead:
    result = admin_users.create_user(session, payload.model_dump(), created_by=current_admin.id)
    raise_for_result(result)
    return UserRead.model_validate(result.data)


@router.patch("/users/{user_id}", response_model=UserRead)
def update_user(user_id: UUID, payload: UserUpdate, session: SessionDep, current_admin: CurrentAdmin) -> UserRead:
    result = admin_users.update_user(session, user_id, payload.model_dump(exclude_unset=True))
    raise_for_result(result)
    return UserRead.model_validate(result.data)


@router.post("/users/{user_id}/toggle-status", response_model=UserRead)
def toggle_user_status(user_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> UserRead:
    user = admin_users.toggle_user_status(session, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Admin %s set user %s active=%s", current_admin.email, user.id, user.is_active)
    return UserRead.model_validate(user)


@router.post("/users/{user_id}/force-logout")
def force_logout(user_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> dict:
    """Revoke every refresh token of the user."""
    if session.get(User, user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    revoked = tokens.revoke_all_user_tokens(session, user_id)
    return {"message": "User logged out from all devices", "revoked": revoked}


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not admin_users.delete_user(session, user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
