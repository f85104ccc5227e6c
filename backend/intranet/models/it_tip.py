from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class ITTipCategory:
    SECURITY = "security"
    PRODUCTIVITY = "productivity"
    SHORTCUTS = "shortcuts"
    SOFTWARE = "software"
    HARDWARE = "hardware"
    GENERAL = "general"

    ALL = (SECURITY, PRODUCTIVITY, SHORTCUTS, SOFTWARE, HARDWARE, GENERAL)


class ITTip(SQLModel, table=True):
    __tablename__ = "it_tips"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    title: str = Field(max_length=100)
    content: str = Field(max_length=500)
    icon: str = Field(default="Lightbulb", max_length=50)
    category: str = Field(default=ITTipCategory.GENERAL, max_length=20, index=True)
    is_active: bool = Field(default=True, index=True)
    is_pinned: bool = Field(default=False)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
