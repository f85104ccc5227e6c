from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CoreValue(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    icon: Optional[str] = Field(default=None, max_length=50)


class CompanyInfoUpdate(BaseModel):
    vision: Optional[str] = Field(default=None, max_length=1000)
    mission: Optional[str] = Field(default=None, max_length=1000)
    core_values: Optional[list[CoreValue]] = None
    vision_image: Optional[str] = Field(default=None, max_length=500)
    mission_image: Optional[str] = Field(default=None, max_length=500)
    values_image: Optional[str] = Field(default=None, max_length=500)


class CompanyInfoRead(BaseModel):
    vision: str
    mission: str
    core_values: list[CoreValue]
    vision_image: Optional[str] = None
    mission_image: Optional[str] = None
    values_image: Optional[str] = None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
