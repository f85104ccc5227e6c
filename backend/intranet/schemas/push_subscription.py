from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PushKeys(BaseModel):
    p256dh: str = Field(..., min_length=1, max_length=255, description="Encryption key")
    auth: str = Field(..., min_length=1, max_length=100, description="Auth secret")


class PushSubscriptionCreate(BaseModel):
    """Browser PushSubscription.toJSON() shape."""

    endpoint: str = Field(..., min_length=1, max_length=1000)
    keys: PushKeys


class PushUnsubscribe(BaseModel):
    endpoint: str = Field(..., min_length=1, max_length=1000)


class PushSubscriptionRead(BaseModel):
    id: UUID
    endpoint: str
    user_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PushTestRequest(BaseModel):
    title: str = Field(default="Test notification", max_length=100)
    body: str = Field(default="Push notifications are working.", max_length=300)
    url: str = Field(default="/", max_length=500)
