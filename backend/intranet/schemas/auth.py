from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class OtpRequest(BaseModel):
    phone: str = Field(min_length=9, max_length=20)


class OtpRequestResponse(BaseModel):
    message: str
    expires_in: Optional[int] = None
    # Only returned in local development when SMS is not configured
    dev_code: Optional[str] = None


class OtpVerifyRequest(BaseModel):
    phone: str = Field(min_length=9, max_length=20)
    otp: str = Field(min_length=4, max_length=10)


class EmailOtpRequest(BaseModel):
    email: EmailStr


class EmailOtpVerifyRequest(BaseModel):
    email: EmailStr
    otp: str = Field(min_length=4, max_length=10)


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class LogoutRequest(BaseModel):
    refresh_token: Optional[str] = None


class SessionRead(BaseModel):
    id: UUID
    device_info: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AdminRead(BaseModel):
    id: UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class AdminToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    admin: AdminRead
