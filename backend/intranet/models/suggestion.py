from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class SuggestionStatus:
    NEW = "new"
    REVIEWED = "reviewed"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    ARCHIVED = "archived"

    ALL = (NEW, REVIEWED, IN_PROGRESS, RESOLVED, ARCHIVED)


class SuggestionCategory(SQLModel, table=True):
    __tablename__ = "suggestion_categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=120, unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()


class Suggestion(SQLModel, table=True):
    """Anonymous suggestion box entry. No submitter is recorded."""

    __tablename__ = "suggestions"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    content: str = Field(max_length=2000)
    category_id: Optional[UUID] = Field(
        default=None, foreign_key="suggestion_categories.id", nullable=True, index=True
    )
    status: str = Field(default=SuggestionStatus.NEW, max_length=20, index=True)
    admin_notes: Optional[str] = Field(default=None, max_length=2000)
    reviewed_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    reviewed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
