from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class TokenBlacklist(SQLModel, table=True):
    """Access tokens invalidated by logout, kept until they expire."""

    __tablename__ = "token_blacklist"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    jti: str = Field(max_length=64, unique=True, index=True)
    expires_at: datetime = Field(nullable=False, index=True)
    blacklisted_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
