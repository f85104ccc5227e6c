from __future__ import annotations

from typing import Annotated, Any, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import select

from intranet.core.config import settings
from intranet.core.security import ADMIN_TOKEN, verify_token
from intranet.db import SessionDep
from intranet.models import AdminUser, User
from intranet.services.otp import EmailOtpService, OtpService, email_otp_service, otp_service
from intranet.services.tokens import verify_access_token
from intranet.services.web_push import PushDeliveryService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/otp/verify")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/otp/verify", auto_error=False)
admin_oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/admin/login", scheme_name="AdminBearer")


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_payload(
    session: SessionDep,
    token: str = Depends(oauth2_scheme),
) -> dict[str, Any]:
    """Decoded access token. Logged-out (blacklisted) tokens are rejected."""
    payload = verify_access_token(session, token)
    if payload is None:
        raise _credentials_error("Could not validate credentials")
    return payload


def _load_active_user(session: SessionDep, payload: dict[str, Any]) -> Optional[User]:
    try:
        user_id = UUID(payload["sub"])
    except (KeyError, ValueError):
        return None
    user = session.exec(select(User).where(User.id == user_id)).one_or_none()
    if not user or not user.is_active:
        return None
    return user


def get_current_user(
    session: SessionDep,
    payload: dict[str, Any] = Depends(get_token_payload),
) -> User:
    user = _load_active_user(session, payload)
    if user is None:
        raise _credentials_error("Inactive or missing user")
    return user


def get_optional_user(
    session: SessionDep,
    token: Optional[str] = Depends(optional_oauth2_scheme),
) -> Optional[User]:
    """Signed-in user if a valid bearer token was sent, otherwise None."""
    if not token:
        return None
    payload = verify_access_token(session, token)
    if payload is None:
        return None
    return _load_active_user(session, payload)


def get_current_admin(
    session: SessionDep,
    token: str = Depends(admin_oauth2_scheme),
) -> AdminUser:
    try:
        payload = verify_token(token, token_type=ADMIN_TOKEN)
        admin_id = UUID(payload["sub"])
    except ValueError:
        raise _credentials_error("Could not validate admin credentials") from None

    admin = session.get(AdminUser, admin_id)
    if not admin or not admin.is_active:
        raise _credentials_error("Inactive or missing admin")
    return admin


def get_push_service(request: Request) -> PushDeliveryService:
    return request.app.state.push_service


def get_otp_service() -> OtpService:
    return otp_service


def get_email_otp_service() -> EmailOtpService:
    return email_otp_service


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[AdminUser, Depends(get_current_admin)]
PushServiceDep = Annotated[PushDeliveryService, Depends(get_push_service)]
OtpServiceDep = Annotated[OtpService, Depends(get_otp_service)]
EmailOtpServiceDep = Annotated[EmailOtpService, Depends(get_email_otp_service)]
