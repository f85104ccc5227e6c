from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel


class UserRole:
    USER = "user"
    MANAGER = "manager"
    DEPARTMENT_HEAD = "department_head"

    ALL = (USER, MANAGER, DEPARTMENT_HEAD)


class UserLocation:
    SITE = "site"
    HEAD_OFFICE = "head-office"

    ALL = (SITE, HEAD_OFFICE)


class User(SQLModel, table=True):
    """Portal user (employee). Signs in with a phone number and SMS code."""

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    employee_id: Optional[str] = Field(default=None, max_length=50, index=True)
    name: str = Field(max_length=255)
    # Canonical 233XXXXXXXXX form, see services.phone
    phone: str = Field(max_length=12, unique=True, index=True)
    email: Optional[str] = Field(default=None, max_length=255, index=True)
    department_id: Optional[UUID] = Field(
        default=None, foreign_key="departments.id", nullable=True, index=True
    )
    position: str = Field(default="", max_length=255)
    location: str = Field(default=UserLocation.SITE, max_length=20, index=True)
    role: str = Field(default=UserRole.USER, max_length=30, index=True)
    permissions: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    is_active: bool = Field(default=True, index=True)
    is_verified: bool = Field(default=False)
    email_verified: bool = Field(default=False)
    last_login: Optional[datetime] = None
    last_login_ip: Optional[str] = Field(default=None, max_length=64)
    login_count: int = Field(default=0)
    created_by: Optional[UUID] = Field(default=None, foreign_key="admin_users.id", nullable=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
