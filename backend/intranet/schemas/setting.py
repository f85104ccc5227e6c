from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SettingsUpdate(BaseModel):
    """Key/value pairs to change, e.g. ``{"maintenanceMode": true}``."""

    settings: dict[str, Any] = Field(min_length=1)


class PublicSettings(BaseModel):
    siteName: str
    siteDescription: str
    maintenanceMode: bool
    maintenanceMessage: str
    enablePushNotifications: bool
