from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel


class ToolboxTalk(SQLModel, table=True):
    """Weekly safety talk.

    ``media`` holds items shaped like ``{"type": "video", "url": ..., "thumbnail": ...}``.
    """

    __tablename__ = "toolbox_talks"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=200)
    slug: str = Field(max_length=120, unique=True, index=True)
    content: str
    summary: Optional[str] = Field(default=None, max_length=500)
    author_name: str = Field(default="", max_length=255)
    media: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    featured_media: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    scheduled_date: date = Field(index=True)
    week: int = Field(ge=1, le=5, index=True)
    month: int = Field(ge=1, le=12, index=True)
    year: int = Field(index=True)
    status: str = Field(default="draft", max_length=20, index=True)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    views: int = Field(default=0)
    created_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
