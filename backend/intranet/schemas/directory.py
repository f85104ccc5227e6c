from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

DepartmentCategoryLiteral = Literal["operations", "support", "hse", "dfsl", "contractors"]


class DepartmentCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    code: str = Field(min_length=1, max_length=20)
    category: DepartmentCategoryLiteral = "operations"
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    order: int = 0


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    category: Optional[DepartmentCategoryLiteral] = None
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    order: Optional[int] = None


class DepartmentRead(BaseModel):
    id: UUID
    name: str
    code: str
    category: str
    description: Optional[str] = None
    is_active: bool
    order: int

    model_config = ConfigDict(from_attributes=True)


class ContactCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=3, max_length=30)
    phone_extension: Optional[str] = Field(default=None, max_length=10)
    email: Optional[EmailStr] = None
    department_id: Optional[UUID] = None
    position: str = Field(default="", max_length=255)
    photo: Optional[str] = Field(default=None, max_length=500)
    is_emergency_contact: bool = False
    is_management: bool = False
    location: Literal["site", "head-office"] = "site"
    is_active: bool = True


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, min_length=3, max_length=30)
    phone_extension: Optional[str] = Field(default=None, max_length=10)
    email: Optional[EmailStr] = None
    department_id: Optional[UUID] = None
    position: Optional[str] = Field(default=None, max_length=255)
    photo: Optional[str] = Field(default=None, max_length=500)
    is_emergency_contact: Optional[bool] = None
    is_management: Optional[bool] = None
    location: Optional[Literal["site", "head-office"]] = None
    is_active: Optional[bool] = None


class ContactRead(BaseModel):
    id: UUID
    name: str
    phone: str
    phone_extension: Optional[str] = None
    email: Optional[str] = None
    department_id: Optional[UUID] = None
    department_name: Optional[str] = None
    position: str
    photo: Optional[str] = None
    is_emergency_contact: bool
    is_management: bool
    location: str
    is_active: bool
