from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

SuggestionStatusLiteral = Literal["new", "reviewed", "in_progress", "resolved", "archived"]


class SuggestionCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    order: int = 0


class SuggestionCategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    order: Optional[int] = None


class SuggestionCategoryRead(BaseModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str] = None
    is_active: bool
    order: int

    model_config = ConfigDict(from_attributes=True)


class SuggestionCreate(BaseModel):
    content: str = Field(min_length=10, max_length=2000)
    category_id: UUID


class SuggestionUpdate(BaseModel):
    status: Optional[SuggestionStatusLiteral] = None
    admin_notes: Optional[str] = Field(default=None, max_length=2000)


class SuggestionRead(BaseModel):
    id: UUID
    content: str
    category_id: Optional[UUID] = None
    category_name: Optional[str] = None
    status: str
    admin_notes: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    reviewed_at: Optional[datetime] = None
    created_at: datetime


class ReportStats(BaseModel):
    total: int
    average_per_day: float
    peak_day: Optional[str] = None
    peak_day_count: int = 0
    average_resolution_hours: Optional[float] = None
    by_status: dict[str, int]


class CategoryBreakdownItem(BaseModel):
    name: str
    value: int
    color: str


class StatusBreakdownItem(BaseModel):
    status: str
    label: str
    value: int
    color: str


class TimelinePoint(BaseModel):
    date: str
    count: int
