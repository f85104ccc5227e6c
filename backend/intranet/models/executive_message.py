from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel


class ExecutiveMessage(SQLModel, table=True):
    """Short message from management shown on the home page."""

    __tablename__ = "executive_messages"

    id: UUID = Field(default_factory=uuid4, primary_key=True, index=True)
    name: str = Field(max_length=100)
    title: str = Field(max_length=100)
    photo: Optional[str] = Field(default=None, max_length=500)
    message: str = Field(max_length=500)
    is_active: bool = Field(default=True, index=True)
    order: int = Field(default=0)
    created_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=datetime.utcnow, nullable=False)

    def touch(self) -> None:
        """Update timestamp."""
        self.updated_at = datetime.utcnow()
