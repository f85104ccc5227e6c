from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel


class Setting(SQLModel, table=True):
    """Runtime setting editable from the back-office."""

    __tablename__ = "settings"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    key: str = Field(max_length=100, unique=True, index=True)
    value: Any = Field(default=None, sa_column=Column(JSON))
    type: str = Field(default="string", max_length=10)  # string | number | boolean | json
    category: str = Field(default="general", max_length=20, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    updated_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
