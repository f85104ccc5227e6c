from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from intranet.schemas.auth import TokenPair

UserRoleLiteral = Literal["user", "manager", "department_head"]
LocationLiteral = Literal["site", "head-office"]


class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    employee_id: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    department_id: Optional[UUID] = None
    position: str = Field(default="", max_length=255)
    location: LocationLiteral = "site"
    role: UserRoleLiteral = "user"
    permissions: list[str] = Field(default_factory=list)


class UserCreate(UserBase):
    phone: str = Field(min_length=9, max_length=20)
    is_active: bool = True


class UserUpdate(BaseModel):
    """Partial update, only provided fields change."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    employee_id: Optional[str] = Field(default=None, max_length=50)
    phone: Optional[str] = Field(default=None, min_length=9, max_length=20)
    email: Optional[EmailStr] = None
    department_id: Optional[UUID] = None
    position: Optional[str] = Field(default=None, max_length=255)
    location: Optional[LocationLiteral] = None
    role: Optional[UserRoleLiteral] = None
    permissions: Optional[list[str]] = None
    is_active: Optional[bool] = None


class UserRead(UserBase):
    id: UUID
    phone: str
    email: Optional[str] = None
    is_active: bool
    is_verified: bool
    email_verified: bool = False
    last_login: Optional[datetime] = None
    login_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserWithTokens(BaseModel):
    user: UserRead
    tokens: TokenPair
