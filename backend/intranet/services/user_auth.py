"""Portal user sign-in by one-time code, by SMS or by email as a backup."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from intranet.models import User
from intranet.services import tokens
from intranet.services.email import is_valid_email, normalize_email
from intranet.services.otp import EmailOtpService, OtpService
from intranet.services.phone import is_valid_phone, normalize_phone
from intranet.services.results import AuthResult, FailureReason, OtpResult

logger = logging.getLogger(__name__)


def get_user_by_phone(session: Session, phone: str, active_only: bool = True) -> Optional[User]:
    statement = select(User).where(User.phone == normalize_phone(phone))
    if active_only:
        statement = statement.where(User.is_active == True)  # noqa: E712
    return session.exec(statement).first()


def request_login_otp(session: Session, otp: OtpService, phone: str) -> OtpResult:
    if not is_valid_phone(phone):
        return OtpResult(False, "Invalid Ghana phone number", FailureReason.INVALID_INPUT)
    if get_user_by_phone(session, phone) is None:
        return OtpResult(False, "Phone number not registered", FailureReason.NOT_FOUND)
    return otp.request_otp(session, phone)


def authenticate_by_phone_otp(
    session: Session,
    otp: OtpService,
    phone: str,
    code: str,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    """Check the code, update login stats and issue a token pair."""
    if not is_valid_phone(phone):
        return AuthResult(False, "Invalid phone number", FailureReason.INVALID_INPUT)

    result = otp.verify_otp(session, phone, code)
    if not result.success:
        return AuthResult(False, result.message, result.reason)

    user = get_user_by_phone(session, phone)
    if user is None:
        return AuthResult(False, "User not found or inactive", FailureReason.NOT_FOUND)

    user.is_verified = True
    return _complete_login(session, user, device_info, ip_address)


def get_user_by_email(session: Session, email: str, active_only: bool = True) -> Optional[User]:
    statement = select(User).where(User.email == normalize_email(email))
    if active_only:
        statement = statement.where(User.is_active == True)  # noqa: E712
    return session.exec(statement).first()


def request_login_email_otp(session: Session, otp: EmailOtpService, email: str) -> OtpResult:
    """Backup sign-in for users whose phone is unavailable."""
    if not is_valid_email(email):
        return OtpResult(False, "Invalid email address", FailureReason.INVALID_INPUT)
    if get_user_by_email(session, email) is None:
        return OtpResult(False, "Email not registered", FailureReason.NOT_FOUND)
    return otp.request_otp(session, email)


def authenticate_by_email_otp(
    session: Session,
    otp: EmailOtpService,
    email: str,
    code: str,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    if not is_valid_email(email):
        return AuthResult(False, "Invalid email address", FailureReason.INVALID_INPUT)

    result = otp.verify_otp(session, email, code)
    if not result.success:
        return AuthResult(False, result.message, result.reason)

    user = get_user_by_email(session, email)
    if user is None:
        return AuthResult(False, "User not found or inactive", FailureReason.NOT_FOUND)

    user.email_verified = True
    return _complete_login(session, user, device_info, ip_address)


def _complete_login(
    session: Session,
    user: User,
    device_info: Optional[str],
    ip_address: Optional[str],
) -> AuthResult:
    user.last_login = datetime.utcnow()
    user.last_login_ip = ip_address
    user.login_count = User.login_count + 1
    user.touch()
    session.add(user)

    pair = tokens.issue_token_pair(session, user, device_info, ip_address, commit=False)
    session.commit()
    session.refresh(user)
    logger.info("User %s signed in", user.id)
    return AuthResult(True, "Authentication successful", user=user, tokens=pair)
