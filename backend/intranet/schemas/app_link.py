from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

IconTypeLiteral = Literal["url", "lucide", "emoji"]


class AppLinkCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=200)
    url: str = Field(min_length=1, max_length=1000)
    icon: str = Field(default="", max_length=500)
    icon_type: IconTypeLiteral = "lucide"
    is_internal: bool = False
    is_active: bool = True
    order: int = 0


class AppLinkUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=200)
    url: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    icon: Optional[str] = Field(default=None, max_length=500)
    icon_type: Optional[IconTypeLiteral] = None
    is_internal: Optional[bool] = None
    is_active: Optional[bool] = None
    order: Optional[int] = None


class AppLinkRead(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    url: str
    icon: str
    icon_type: str
    is_internal: bool
    is_active: bool
    order: int
    clicks: int

    model_config = ConfigDict(from_attributes=True)
