from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class OtpChannel(str, Enum):
    SMS = "sms"
    EMAIL = "email"


class OtpCode(SQLModel, table=True):
    """One-time sign-in code sent by SMS or email."""

    __tablename__ = "otp_codes"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    channel: str = Field(default=OtpChannel.SMS, max_length=10, index=True)
    # Normalized phone (233XXXXXXXXX) or lower-cased email
    recipient: str = Field(max_length=255, index=True)
    code_hash: str = Field(max_length=64)
    attempts: int = Field(default=0)
    expires_at: datetime = Field(nullable=False, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
