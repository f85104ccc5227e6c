from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MediaItem(BaseModel):
    type: Literal["video", "audio", "image"]
    url: str = Field(min_length=1, max_length=1000)
    thumbnail: Optional[str] = Field(default=None, max_length=1000)
    duration: Optional[int] = Field(default=None, ge=0, description="Seconds")
    caption: Optional[str] = Field(default=None, max_length=300)


class ToolboxTalkCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    summary: Optional[str] = Field(default=None, max_length=500)
    author_name: str = Field(default="", max_length=255)
    media: list[MediaItem] = Field(default_factory=list)
    featured_media: Optional[MediaItem] = None
    scheduled_date: date
    status: Literal["draft", "published", "archived"] = "draft"
    tags: list[str] = Field(default_factory=list)


class ToolboxTalkUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    summary: Optional[str] = Field(default=None, max_length=500)
    author_name: Optional[str] = Field(default=None, max_length=255)
    media: Optional[list[MediaItem]] = None
    featured_media: Optional[MediaItem] = None
    scheduled_date: Optional[date] = None
    status: Optional[Literal["draft", "published", "archived"]] = None
    tags: Optional[list[str]] = None


class ToolboxTalkRead(BaseModel):
    id: UUID
    title: str
    slug: str
    content: str
    summary: Optional[str] = None
    author_name: str
    media: list[MediaItem]
    featured_media: Optional[MediaItem] = None
    scheduled_date: date
    week: int
    month: int
    year: int
    status: str
    tags: list[str]
    views: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class WeekInfo(BaseModel):
    week: int
    month: int
    year: int
    month_name: str


class ArchiveMonth(BaseModel):
    year: int
    month: int
    month_name: str
    count: int
