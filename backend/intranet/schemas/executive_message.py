from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ExecutiveMessageCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    title: str = Field(min_length=1, max_length=100)
    photo: Optional[str] = Field(default=None, max_length=500)
    message: str = Field(min_length=1, max_length=500)
    is_active: bool = True
    order: int = 0


class ExecutiveMessageUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    photo: Optional[str] = Field(default=None, max_length=500)
    message: Optional[str] = Field(default=None, min_length=1, max_length=500)
    is_active: Optional[bool] = None
    order: Optional[int] = None


class ExecutiveMessageRead(BaseModel):
    id: UUID
    name: str
    title: str
    photo: Optional[str] = None
    message: str
    is_active: bool
    order: int

    model_config = ConfigDict(from_attributes=True)
