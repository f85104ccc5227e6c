from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

import bcrypt
from jose import JWTError, jwt

from intranet.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"
ADMIN_TOKEN = "admin"


class IssuedToken:
    """Encoded JWT together with the claims needed for bookkeeping."""

    __slots__ = ("token", "jti", "expires_at")

    def __init__(self, token: str, jti: str, expires_at: datetime):
        self.token = token
        self.jti = jti
        # Naive UTC, matches how the database stores timestamps
        self.expires_at = expires_at


def create_token(
    subject: str | Any,
    expires_delta: timedelta,
    token_type: str,
    extra_claims: Dict[str, Any] | None = None,
) -> IssuedToken:
    now = datetime.now(timezone.utc)
    expire = now + expires_delta
    jti = str(uuid4())
    payload: Dict[str, Any] = {
        **(extra_claims or {}),
        "exp": expire,
        "iat": now,
        "sub": str(subject),
        "type": token_type,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return IssuedToken(token, jti, expire.replace(tzinfo=None))


def create_access_token(subject: str | Any, extra_claims: Dict[str, Any] | None = None) -> IssuedToken:
    return create_token(
        subject,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        ACCESS_TOKEN,
        extra_claims,
    )


def create_refresh_token(subject: str | Any, extra_claims: Dict[str, Any] | None = None) -> IssuedToken:
    return create_token(
        subject,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        REFRESH_TOKEN,
        extra_claims,
    )


def create_admin_token(subject: str | Any, extra_claims: Dict[str, Any] | None = None) -> IssuedToken:
    return create_token(
        subject,
        timedelta(hours=settings.ADMIN_TOKEN_EXPIRE_HOURS),
        ADMIN_TOKEN,
        extra_claims,
    )


def verify_token(token: str, token_type: str = ACCESS_TOKEN) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        if payload.get("type") != token_type:
            raise JWTError("Invalid token type")
        if not payload.get("jti") or not payload.get("sub"):
            raise JWTError("Missing token claims")
        return payload
    except JWTError as exc:
        raise ValueError("Invalid token") from exc


def hash_token_id(value: str) -> str:
    """One-way hash used to store token identifiers and OTP codes."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash using bcrypt directly."""
    try:
        password_bytes = plain_password.encode("utf-8")
        # bcrypt only looks at the first 72 bytes
        if len(password_bytes) > 72:
            password_bytes = password_bytes[:72]
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError as exc:
        logger.error("Password verification error: %s", exc)
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    salt = bcrypt.gensalt(rounds=12)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")
