"""Runtime settings stored in the database, with defaults and a short cache."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlmodel import Session, select

from intranet.core.cache import get_cache
from intranet.models import Setting

logger = logging.getLogger(__name__)

CACHE_KEY = "settings:all"
CACHE_TTL_SECONDS = 60

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    # General
    "siteName": {"value": "ARL Intranet", "type": "string", "category": "general", "description": "Site name displayed in header"},
    "siteDescription": {"value": "Adamus Resources Limited Intranet Portal", "type": "string", "category": "general", "description": "Site description"},
    "maintenanceMode": {"value": False, "type": "boolean", "category": "general", "description": "Enable maintenance mode"},
    "maintenanceMessage": {"value": "The site is currently under maintenance. Please check back later.", "type": "string", "category": "general", "description": "Message shown during maintenance"},
    # Notifications
    "enablePushNotifications": {"value": True, "type": "boolean", "category": "notifications", "description": "Send push notifications when content is published"},
    "emailNotificationsEnabled": {"value": True, "type": "boolean", "category": "notifications", "description": "Enable email notifications"},
    "smsNotificationsEnabled": {"value": True, "type": "boolean", "category": "notifications", "description": "Enable SMS notifications"},
    "adminEmailRecipients": {"value": "", "type": "string", "category": "notifications", "description": "Comma-separated admin email addresses"},
    # Security
    "sessionTimeoutHours": {"value": 24, "type": "number", "category": "security", "description": "Session timeout in hours"},
    "maxLoginAttempts": {"value": 5, "type": "number", "category": "security", "description": "Max failed login attempts before lockout"},
    "lockoutDurationMinutes": {"value": 30, "type": "number", "category": "security", "description": "Account lockout duration in minutes"},
    "otpExpiryMinutes": {"value": 5, "type": "number", "category": "security", "description": "OTP expiry time in minutes"},
    # System
    "cacheEnabled": {"value": True, "type": "boolean", "category": "system", "description": "Enable caching"},
    "debugMode": {"value": False, "type": "boolean", "category": "system", "description": "Enable debug mode"},
}

PUBLIC_KEYS = ("siteName", "siteDescription", "maintenanceMode", "maintenanceMessage", "enablePushNotifications")


def coerce_value(key: str, value: Any) -> Any:
    """Convert ``value`` to the declared type of ``key``. Raises ValueError."""
    config = DEFAULT_SETTINGS.get(key)
    if config is None:
        raise ValueError(f"Unknown setting: {key}")

    expected = config["type"]
    if expected == "boolean":
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return value is True
    if expected == "number":
        if isinstance(value, bool):
            raise ValueError(f"Setting {key} must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Setting {key} must be a number") from exc
        return int(number) if number.is_integer() else number
    if expected == "string":
        return "" if value is None else str(value)
    return value


def clear_settings_cache() -> None:
    get_cache().delete(CACHE_KEY)


def get_all_settings(session: Session) -> dict[str, Any]:
    """Defaults overridden by stored values. Cached for a minute."""
    cache = get_cache()
    cached = cache.get(CACHE_KEY)
    if isinstance(cached, dict):
        return cached

    result = {key: config["value"] for key, config in DEFAULT_SETTINGS.items()}
    for setting in session.exec(select(Setting)).all():
        result[setting.key] = setting.value

    cache.set(CACHE_KEY, result, ttl=CACHE_TTL_SECONDS)
    return result


def get_setting(session: Session, key: str) -> Any:
    settings = get_all_settings(session)
    if key in settings:
        return settings[key]
    config = DEFAULT_SETTINGS.get(key)
    return config["value"] if config else None


def get_public_settings(session: Session) -> dict[str, Any]:
    settings = get_all_settings(session)
    return {key: settings[key] for key in PUBLIC_KEYS}


def is_maintenance_mode(session: Session) -> bool:
    return bool(get_setting(session, "maintenanceMode"))


def get_maintenance_message(session: Session) -> str:
    return get_setting(session, "maintenanceMessage")


def update_settings(session: Session, updates: dict[str, Any], updated_by: Optional[UUID] = None) -> dict[str, Any]:
    """Store several settings at once. Nothing is written if any key is unknown."""
    coerced = {key: coerce_value(key, value) for key, value in updates.items()}

    existing = {
        s.key: s for s in session.exec(select(Setting).where(Setting.key.in_(list(coerced)))).all()
    }
    for key, value in coerced.items():
        config = DEFAULT_SETTINGS[key]
        setting = existing.get(key) or Setting(key=key)
        setting.value = value
        setting.type = config["type"]
        setting.category = config["category"]
        setting.description = config["description"]
        setting.updated_by = updated_by
        setting.updated_at = datetime.utcnow()
        session.add(setting)
    session.commit()
    clear_settings_cache()
    logger.info("Settings updated: %s", ", ".join(sorted(coerced)))
    return get_all_settings(session)


def get_settings_for_admin(session: Session) -> dict[str, list[dict[str, Any]]]:
    """Settings grouped by category with type and description, for the admin form."""
    values = get_all_settings(session)
    grouped: dict[str, list[dict[str, Any]]] = {}
    for key, config in DEFAULT_SETTINGS.items():
        grouped.setdefault(config["category"], []).append(
            {
                "key": key,
                "value": values.get(key, config["value"]),
                "type": config["type"],
                "description": config["description"],
            }
        )
    return grouped
