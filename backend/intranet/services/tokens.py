"""Access/refresh token issuing, rotation and revocation."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, update
from sqlmodel import Session, select

from intranet.core.config import settings
from intranet.core.security import (
    REFRESH_TOKEN,
    create_access_token,
    create_refresh_token,
    hash_token_id,
    verify_token,
)
from intranet.models import RefreshToken, TokenBlacklist, User
from intranet.services.results import AuthResult, FailureReason, TokenPair

logger = logging.getLogger(__name__)

INVALID_REFRESH_MESSAGE = "Invalid or expired refresh token"


def _user_claims(user: User) -> dict[str, Any]:
    return {"phone": user.phone, "name": user.name, "role": user.role}


def issue_token_pair(
    session: Session,
    user: User,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
    commit: bool = True,
) -> TokenPair:
    """Create an access/refresh pair and record the refresh token."""
    claims = _user_claims(user)
    access = create_access_token(user.id, claims)
    refresh = create_refresh_token(user.id, claims)

    session.add(
        RefreshToken(
            user_id=user.id,
            token_hash=hash_token_id(refresh.jti),
            device_info=device_info[:500] if device_info else None,
            ip_address=ip_address,
            expires_at=refresh.expires_at,
        )
    )
    if commit:
        session.commit()

    return TokenPair(
        access_token=access.token,
        refresh_token=refresh.token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def rotate_refresh_token(
    session: Session,
    token: str,
    device_info: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthResult:
    """Exchange a refresh token for a new pair, revoking the old one.

    The old row is revoked with a single conditional UPDATE, so when the same
    token is presented concurrently only one caller gets a new pair.
    """
    failure = AuthResult(success=False, message=INVALID_REFRESH_MESSAGE, reason=FailureReason.NOT_FOUND)
    try:
        payload = verify_token(token, REFRESH_TOKEN)
    except ValueError:
        return failure

    token_hash = hash_token_id(payload["jti"])
    now = datetime.utcnow()
    result = session.execute(
        update(RefreshToken)
        .where(
            RefreshToken.token_hash == token_hash,
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > now,
        )
        .values(is_revoked=True, revoked_at=now)
    )
    if result.rowcount != 1:
        session.rollback()
        logger.info("Refresh token rejected (revoked, expired or unknown)")
        return failure

    old = session.exec(select(RefreshToken).where(RefreshToken.token_hash == token_hash)).one()
    user = session.get(User, old.user_id)
    if user is None or not user.is_active:
        session.rollback()
        return failure

    tokens = issue_token_pair(
        session,
        user,
        device_info=device_info or old.device_info,
        ip_address=ip_address or old.ip_address,
        commit=False,
    )
    session.commit()
    return AuthResult(success=True, message="Token refreshed", user=user, tokens=tokens)


def revoke_refresh_token(session: Session, token: str) -> bool:
    """Revoke a single refresh token. Unknown or already revoked tokens are ignored."""
    try:
        payload = verify_token(token, REFRESH_TOKEN)
    except ValueError:
        return False
    result = session.execute(
        update(RefreshToken)
        .where(RefreshToken.token_hash == hash_token_id(payload["jti"]), RefreshToken.is_revoked == False)  # noqa: E712
        .values(is_revoked=True, revoked_at=datetime.utcnow())
    )
    session.commit()
    return bool(result.rowcount)


def revoke_all_user_tokens(session: Session, user_id: UUID) -> int:
    """Log the user out on every device."""
    result = session.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user_id, RefreshToken.is_revoked == False)  # noqa: E712
        .values(is_revoked=True, revoked_at=datetime.utcnow())
    )
    session.commit()
    logger.info("Revoked %s refresh tokens for user %s", result.rowcount, user_id)
    return result.rowcount or 0


def revoke_session(session: Session, user_id: UUID, token_id: UUID) -> bool:
    """Revoke one device session belonging to ``user_id``."""
    result = session.execute(
        update(RefreshToken)
        .where(
            RefreshToken.id == token_id,
            RefreshToken.user_id == user_id,
            RefreshToken.is_revoked == False,  # noqa: E712
        )
        .values(is_revoked=True, revoked_at=datetime.utcnow())
    )
    session.commit()
    return bool(result.rowcount)


def list_active_sessions(session: Session, user_id: UUID) -> list[RefreshToken]:
    statement = (
        select(RefreshToken)
        .where(
            RefreshToken.user_id == user_id,
            RefreshToken.is_revoked == False,  # noqa: E712
            RefreshToken.expires_at > datetime.utcnow(),
        )
        .order_by(RefreshToken.created_at.desc())
    )
    return list(session.exec(statement).all())


def blacklist_access_token(session: Session, payload: dict[str, Any]) -> None:
    """Block a decoded access token until it expires."""
    jti = payload["jti"]
    if session.exec(select(TokenBlacklist).where(TokenBlacklist.jti == jti)).first():
        return
    if payload.get("exp"):
        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc).replace(tzinfo=None)
    else:
        expires_at = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    session.add(TokenBlacklist(jti=jti, expires_at=expires_at))
    session.commit()


def is_token_blacklisted(session: Session, jti: str) -> bool:
    return session.exec(select(TokenBlacklist.id).where(TokenBlacklist.jti == jti)).first() is not None


def verify_access_token(session: Session, token: str) -> Optional[dict[str, Any]]:
    """Decode an access token, rejecting blacklisted ones."""
    try:
        payload = verify_token(token)
    except ValueError:
        return None
    if is_token_blacklisted(session, payload["jti"]):
        return None
    return payload


def cleanup_expired_tokens(session: Session) -> dict[str, int]:
    """Delete refresh tokens past the grace window and expired blacklist entries."""
    now = datetime.utcnow()
    grace_cutoff = now - timedelta(hours=settings.REFRESH_TOKEN_GRACE_HOURS)
    refresh = session.execute(delete(RefreshToken).where(RefreshToken.expires_at < grace_cutoff))
    blacklist = session.execute(delete(TokenBlacklist).where(TokenBlacklist.expires_at < now))
    session.commit()
    return {
        "refresh_tokens": refresh.rowcount or 0,
        "blacklisted_tokens": blacklist.rowcount or 0,
    }
