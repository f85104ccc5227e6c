from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

ITTipCategoryLiteral = Literal["security", "productivity", "shortcuts", "software", "hardware", "general"]


class ITTipCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    content: str = Field(min_length=1, max_length=500)
    icon: str = Field(default="Lightbulb", max_length=50)
    category: ITTipCategoryLiteral = "general"
    is_active: bool = True
    is_pinned: bool = False
    order: int = 0


class ITTipUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    content: Optional[str] = Field(default=None, min_length=1, max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)
    category: Optional[ITTipCategoryLiteral] = None
    is_active: Optional[bool] = None
    is_pinned: Optional[bool] = None
    order: Optional[int] = None


class ITTipRead(BaseModel):
    id: UUID
    title: str
    content: str
    icon: str
    category: str
    is_active: bool
    is_pinned: bool
    order: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
