from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "ARL Intranet API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite:///./intranet.db"

    # JWT
    SECRET_KEY: str = "arl-jwt-secret-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    # Expired refresh tokens are kept this long before the cleanup sweep deletes them
    REFRESH_TOKEN_GRACE_HOURS: int = 24
    ADMIN_TOKEN_EXPIRE_HOURS: int = 24

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Web Push (VAPID). Empty keys leave push unconfigured.
    VAPID_PUBLIC_KEY: str = ""
    VAPID_PRIVATE_KEY: str = ""
    VAPID_SUBJECT: str = "mailto:admin@arl.com"
    # 0 = no cap on parallel sends
    PUSH_MAX_CONCURRENCY: int = 0
    PUSH_TIMEOUT_SECONDS: float = 10.0

    # SMS (smsonlinegh.com). Empty API key logs messages instead of sending.
    SMS_API_KEY: str = ""
    SMS_SENDER_ID: str = "ARL"
    SMS_BASE_URL: str = "https://api.smsonlinegh.com/v5/message/sms/send"
    SMS_TIMEOUT_SECONDS: float = 15.0

    # Email (Resend). Empty API key logs messages instead of sending.
    EMAIL_API_KEY: str = ""
    EMAIL_FROM: str = "noreply@arl.com"
    EMAIL_FROM_NAME: str = "ARL Intranet"
    EMAIL_BASE_URL: str = "https://api.resend.com/emails"
    EMAIL_TIMEOUT_SECONDS: float = 15.0

    # OTP
    OTP_LENGTH: int = 6
    OTP_EXPIRY_MINUTES: int = 5
    OTP_MAX_ATTEMPTS: int = 5
    OTP_COOLDOWN_SECONDS: int = 60
    OTP_HOURLY_LIMIT: int = 5

    # Redis configuration
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_CACHE_URL: str = "redis://localhost:6379/1"  # Separate DB for cache

    # Celery configuration
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    OTP_RATE_LIMIT: str = "5/minute"
    ADMIN_LOGIN_RATE_LIMIT: str = "10/minute"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY", "SMS_API_KEY", "EMAIL_API_KEY", mode="before")
    @classmethod
    def strip_secret(cls, value: str | None) -> str:
        return (value or "").strip()


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
