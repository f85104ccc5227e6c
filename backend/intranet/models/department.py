from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class DepartmentCategory:
    OPERATIONS = "operations"
    SUPPORT = "support"
    HSE = "hse"
    DFSL = "dfsl"
    CONTRACTORS = "contractors"

    ALL = (OPERATIONS, SUPPORT, HSE, DFSL, CONTRACTORS)


class Department(SQLModel, table=True):
    """Department used by the staff directory."""

    __tablename__ = "departments"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=255)
    code: str = Field(max_length=20, unique=True, index=True)
    category: str = Field(default=DepartmentCategory.OPERATIONS, max_length=20, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
