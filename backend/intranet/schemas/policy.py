from __future__ import annotations

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from intranet.schemas.news import ContentStatusLiteral


class PolicyCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: str = Field(default="#d2ab67", max_length=20)
    order: Optional[int] = None
    is_active: bool = True


class PolicyCategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)
    order: Optional[int] = None
    is_active: Optional[bool] = None


class PolicyCategoryRead(BaseModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon: Optional[str] = None
    color: str
    order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryOrder(BaseModel):
    ids: list[UUID] = Field(min_length=1)


class PolicyCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    category_id: UUID
    content: str = ""
    excerpt: Optional[str] = Field(default=None, max_length=500)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    pdf_file_name: Optional[str] = Field(default=None, max_length=255)
    effective_date: Optional[date] = None
    version: Optional[str] = Field(default=None, max_length=20)
    status: ContentStatusLiteral = "draft"
    is_featured: bool = False


class PolicyUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category_id: Optional[UUID] = None
    content: Optional[str] = None
    excerpt: Optional[str] = Field(default=None, max_length=500)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    pdf_file_name: Optional[str] = Field(default=None, max_length=255)
    effective_date: Optional[date] = None
    version: Optional[str] = Field(default=None, max_length=20)
    status: Optional[ContentStatusLiteral] = None
    is_featured: Optional[bool] = None


class PolicyRead(BaseModel):
    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str
    category_id: UUID
    category: Optional[PolicyCategoryRead] = None
    pdf_url: Optional[str] = None
    pdf_file_name: Optional[str] = None
    effective_date: Optional[date] = None
    version: Optional[str] = None
    status: str
    is_featured: bool
    views: int
    published_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PolicyStats(BaseModel):
    total: int
    draft: int
    published: int
    archived: int
