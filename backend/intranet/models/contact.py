from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class Contact(SQLModel, table=True):
    """Staff directory entry."""

    __tablename__ = "contacts"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255, index=True)
    phone: str = Field(max_length=30)
    phone_extension: Optional[str] = Field(default=None, max_length=10)
    email: Optional[str] = Field(default=None, max_length=255)
    department_id: Optional[UUID] = Field(
        default=None, foreign_key="departments.id", nullable=True, index=True
    )
    position: str = Field(default="", max_length=255)
    photo: Optional[str] = Field(default=None, max_length=500)
    is_emergency_contact: bool = Field(default=False, index=True)
    is_management: bool = Field(default=False, index=True)
    location: str = Field(default="site", max_length=20, index=True)
    is_active: bool = Field(default=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
