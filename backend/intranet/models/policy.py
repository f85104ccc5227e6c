from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from intranet.models.news import ContentStatus


class PolicyCategory(SQLModel, table=True):
    __tablename__ = "policy_categories"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    slug: str = Field(max_length=120, unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: str = Field(default="#d2ab67", max_length=20)
    order: int = Field(default=0, index=True)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()


class Policy(SQLModel, table=True):
    """Company policy document, written in HTML or attached as a PDF."""

    __tablename__ = "policies"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=200)
    slug: str = Field(max_length=120, unique=True, index=True)
    content: str = ""
    excerpt: str = Field(default="", max_length=500)
    category_id: UUID = Field(foreign_key="policy_categories.id", index=True)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    pdf_file_name: Optional[str] = Field(default=None, max_length=255)
    effective_date: Optional[date] = None
    version: Optional[str] = Field(default=None, max_length=20)
    status: str = Field(default=ContentStatus.DRAFT, max_length=20, index=True)
    is_featured: bool = Field(default=False, index=True)
    views: int = Field(default=0)
    created_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    updated_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    published_at: Optional[datetime] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
