"""Typed results returned by services for expected failures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class FailureReason(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    SENDER_REJECTED = "sender_rejected"
    PROVIDER_ERROR = "provider_error"
    CONFLICT = "conflict"


@dataclass
class ServiceResult:
    success: bool
    message: str = ""
    reason: Optional[FailureReason] = None
    data: Any = None

    @classmethod
    def ok(cls, message: str = "", data: Any = None) -> "ServiceResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "ServiceResult":
        return cls(success=False, message=message, reason=reason)


@dataclass
class SmsResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[FailureReason] = None
    # True when no SMS credentials are configured and the text was only logged
    dev_mode: bool = False


@dataclass
class EmailResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[FailureReason] = None
    # True when no email credentials are configured and the message was only logged
    dev_mode: bool = False


@dataclass
class OtpResult:
    success: bool
    message: str
    reason: Optional[FailureReason] = None
    expires_in: Optional[int] = None
    dev_code: Optional[str] = None


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


@dataclass
class AuthResult:
    success: bool
    message: str = ""
    reason: Optional[FailureReason] = None
    user: Any = None
    tokens: Optional[TokenPair] = None
    extra: dict[str, Any] = field(default_factory=dict)
