from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

NewsCategoryLiteral = Literal["company", "operations", "safety", "hr", "community", "general"]
ContentStatusLiteral = Literal["draft", "published", "archived"]


class NewsCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    category: NewsCategoryLiteral = "general"
    author_name: str = Field(default="", max_length=255)
    images: list[str] = Field(default_factory=list)
    featured_image: Optional[str] = Field(default=None, max_length=500)
    is_featured: bool = False
    status: ContentStatusLiteral = "draft"
    tags: list[str] = Field(default_factory=list)


class NewsUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = Field(default=None, max_length=300)
    category: Optional[NewsCategoryLiteral] = None
    author_name: Optional[str] = Field(default=None, max_length=255)
    images: Optional[list[str]] = None
    featured_image: Optional[str] = Field(default=None, max_length=500)
    is_featured: Optional[bool] = None
    status: Optional[ContentStatusLiteral] = None
    tags: Optional[list[str]] = None


class NewsRead(BaseModel):
    id: UUID
    title: str
    slug: str
    excerpt: str
    content: str
    category: str
    author_name: str
    images: list[str]
    featured_image: Optional[str] = None
    is_featured: bool
    status: str
    published_at: Optional[datetime] = None
    view_count: int
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
