"""Back-office accounts and portal user management."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, func, or_, update
from sqlmodel import Session, select

from intranet.core.security import get_password_hash, verify_password
from intranet.models import AdminUser, PushSubscription, RefreshToken, User
from intranet.services import tokens
from intranet.services.email import normalize_email
from intranet.services.phone import is_valid_phone, normalize_phone
from intranet.services.results import FailureReason, ServiceResult

logger = logging.getLogger(__name__)


def authenticate_admin(session: Session, email: str, password: str) -> Optional[AdminUser]:
    admin = session.exec(select(AdminUser).where(AdminUser.email == email.strip().lower())).one_or_none()
    if admin is None or not verify_password(password, admin.hashed_password):
        return None
    if not admin.is_active:
        return None
    admin.last_login = datetime.utcnow()
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def create_or_update_admin(session: Session, email: str, name: str, password: str, role: str = "admin") -> AdminUser:
    email = email.strip().lower()
    admin = session.exec(select(AdminUser).where(AdminUser.email == email)).one_or_none()
    if admin is None:
        admin = AdminUser(email=email, name=name, hashed_password=get_password_hash(password), role=role)
    else:
        admin.name = name
        admin.role = role
        admin.hashed_password = get_password_hash(password)
        admin.is_active = True
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


# === PORTAL USERS ===


def list_users(
    session: Session,
    *,
    search: Optional[str] = None,
    role: Optional[str] = None,
    department_id: Optional[UUID] = None,
    is_active: Optional[bool] = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[User], int]:
    filters = []
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                User.name.ilike(pattern),
                User.phone.ilike(pattern),
                User.email.ilike(pattern),
                User.employee_id.ilike(pattern),
            )
        )
    if role:
        filters.append(User.role == role)
    if department_id:
        filters.append(User.department_id == department_id)
    if is_active is not None:
        filters.append(User.is_active == is_active)

    total = session.exec(select(func.count()).select_from(User).where(*filters)).one()
    statement = select(User).where(*filters).order_by(User.name).offset(skip).limit(limit)
    return list(session.exec(statement).all()), total


def _phone_taken(session: Session, phone: str, exclude_id: Optional[UUID] = None) -> bool:
    statement = select(User.id).where(User.phone == phone)
    if exclude_id is not None:
        statement = statement.where(User.id != exclude_id)
    return session.exec(statement).first() is not None


def create_user(session: Session, data: dict[str, Any], created_by: Optional[UUID] = None) -> ServiceResult:
    if not is_valid_phone(data["phone"]):
        return ServiceResult.fail(FailureReason.INVALID_INPUT, "Invalid Ghana phone number")
    phone = normalize_phone(data["phone"])
    if _phone_taken(session, phone):
        return ServiceResult.fail(FailureReason.CONFLICT, "A user with this phone number already exists")

    data = {**data, "phone": phone}
    if data.get("email"):
        data["email"] = normalize_email(data["email"])
    user = User(**data, created_by=created_by)
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Portal user %s created", user.id)
    return ServiceResult.ok(data=user)


def update_user(session: Session, user_id: UUID, data: dict[str, Any]) -> ServiceResult:
    user = session.get(User, user_id)
    if user is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "User not found")

    if data.get("phone"):
        if not is_valid_phone(data["phone"]):
            return ServiceResult.fail(FailureReason.INVALID_INPUT, "Invalid Ghana phone number")
        data = {**data, "phone": normalize_phone(data["phone"])}
        if _phone_taken(session, data["phone"], exclude_id=user_id):
            return ServiceResult.fail(FailureReason.CONFLICT, "A user with this phone number already exists")
    if data.get("email"):
        data = {**data, "email": normalize_email(data["email"])}
        if data["email"] != user.email:
            data["email_verified"] = False

    deactivated = data.get("is_active") is False and user.is_active
    for key, value in data.items():
        if value is None and key in ("name", "phone", "position", "location", "role", "permissions", "is_active"):
            continue
        setattr(user, key, value)
    user.touch()
    session.add(user)
    session.commit()
    session.refresh(user)
    if deactivated:
        tokens.revoke_all_user_tokens(session, user.id)
    return ServiceResult.ok(data=user)


def toggle_user_status(session: Session, user_id: UUID) -> Optional[User]:
    user = session.get(User, user_id)
    if user is None:
        return None
    user.is_active = not user.is_active
    user.touch()
    session.add(user)
    session.commit()
    session.refresh(user)
    if not user.is_active:
        # Deactivated users lose their sessions immediately
        tokens.revoke_all_user_tokens(session, user.id)
    return user


def delete_user(session: Session, user_id: UUID) -> bool:
    """Delete the user with their refresh tokens. Push subscriptions are kept but unlinked."""
    user = session.get(User, user_id)
    if user is None:
        return False
    session.execute(delete(RefreshToken).where(RefreshToken.user_id == user_id))
    session.execute(
        update(PushSubscription).where(PushSubscription.user_id == user_id).values(user_id=None)
    )
    session.delete(user)
    session.commit()
    logger.info("Portal user %s deleted", user_id)
    return True
