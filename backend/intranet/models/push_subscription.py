from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class PushSubscription(SQLModel, table=True):
    """Web Push subscription for browser notifications."""

    __tablename__ = "push_subscriptions"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    # One row per browser channel
    endpoint: str = Field(max_length=1000, unique=True, index=True)
    p256dh: str = Field(max_length=255)  # Encryption key
    auth: str = Field(max_length=100)  # Auth secret
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", nullable=True, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
