from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel


class NewsCategory:
    COMPANY = "company"
    OPERATIONS = "operations"
    SAFETY = "safety"
    HR = "hr"
    COMMUNITY = "community"
    GENERAL = "general"

    ALL = (COMPANY, OPERATIONS, SAFETY, HR, COMMUNITY, GENERAL)


class ContentStatus:
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

    ALL = (DRAFT, PUBLISHED, ARCHIVED)


class News(SQLModel, table=True):
    """Company news article."""

    __tablename__ = "news"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=200)
    slug: str = Field(max_length=120, unique=True, index=True)
    excerpt: str = Field(default="", max_length=300)
    content: str
    category: str = Field(default=NewsCategory.GENERAL, max_length=20, index=True)
    author_name: str = Field(default="", max_length=255)
    images: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    featured_image: Optional[str] = Field(default=None, max_length=500)
    is_featured: bool = Field(default=False, index=True)
    status: str = Field(default=ContentStatus.DRAFT, max_length=20, index=True)
    published_at: Optional[datetime] = Field(default=None, index=True)
    view_count: int = Field(default=0)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    created_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
