from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, Field, SQLModel


class CompanyInfo(SQLModel, table=True):
    """Vision, mission and core values. A single row is kept."""

    __tablename__ = "company_info"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    vision: str = Field(default="")
    mission: str = Field(default="")
    # [{"title": ..., "description": ..., "icon": ...}]
    core_values: list[dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON))
    vision_image: Optional[str] = Field(default=None, max_length=500)
    mission_image: Optional[str] = Field(default=None, max_length=500)
    values_image: Optional[str] = Field(default=None, max_length=500)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
