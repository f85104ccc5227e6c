from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class AppLink(SQLModel, table=True):
    """Shortcut to an internal or external application."""

    __tablename__ = "app_links"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=200)
    url: str = Field(max_length=1000)
    icon: str = Field(default="", max_length=500)
    icon_type: str = Field(default="lucide", max_length=10)  # url | lucide | emoji
    is_internal: bool = Field(default=False)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    clicks: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
