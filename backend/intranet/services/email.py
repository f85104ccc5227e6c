"""Transactional email through the Resend HTTP API."""

from __future__ import annotations

import logging
import re
import time
from typing import Optional

import requests

from intranet.core.config import Settings, settings
from intranet.services.results import EmailResult, FailureReason

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

OTP_SUBJECT = "Your ARL Intranet Verification Code"
OTP_TEXT = "Your ARL Intranet verification code is: {code}. Valid for {minutes} minutes. Do not share this code."
OTP_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #1B365D;">Verification Code</h2>
  <p>Your one-time verification code is:</p>
  <p style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #1B365D;">{code}</p>
  <p style="color: #666;">This code will expire in <strong>{minutes} minutes</strong>. Do not share it with anyone.</p>
  <p style="color: #999; font-size: 12px;">If you didn't request this code, ignore this email or contact IT support.</p>
</div>
"""


def normalize_email(raw: str | None) -> str:
    return (raw or "").strip().lower()


def is_valid_email(raw: str | None) -> bool:
    return bool(_EMAIL.match(normalize_email(raw)))


def mask_email(email: str) -> str:
    """kwame.mensah@arl.com -> kw***@arl.com, for logs."""
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}"


class EmailClient:
    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        self.api_key = config.EMAIL_API_KEY
        self.sender = f"{config.EMAIL_FROM_NAME} <{config.EMAIL_FROM}>"
        self.base_url = config.EMAIL_BASE_URL
        self.timeout = config.EMAIL_TIMEOUT_SECONDS
        self.otp_minutes = config.OTP_EXPIRY_MINUTES

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> EmailResult:
        """Send one email. Never raises."""
        if not self.is_configured:
            logger.warning("EMAIL_API_KEY not set, email to %s not sent: %s | %s", to, subject, text or "(HTML only)")
            return EmailResult(success=True, message_id=f"dev-{int(time.time() * 1000)}", dev_mode=True)

        try:
            response = requests.post(
                self.base_url,
                headers={"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"},
                json={"from": self.sender, "to": [to], "subject": subject, "html": html, "text": text},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Email sending error for %s: %s", mask_email(to), e)
            return EmailResult(success=False, error=str(e), reason=FailureReason.PROVIDER_ERROR)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.ok and data.get("id"):
            logger.info("Email sent to %s", mask_email(to))
            return EmailResult(success=True, message_id=data["id"])

        error = data.get("message") or "Failed to send email"
        logger.error("Email provider returned %s: %s", response.status_code, error)
        return EmailResult(success=False, error=error, reason=FailureReason.PROVIDER_ERROR)

    def send_otp(self, email: str, code: str) -> EmailResult:
        return self.send(
            email,
            OTP_SUBJECT,
            OTP_HTML.format(code=code, minutes=self.otp_minutes),
            OTP_TEXT.format(code=code, minutes=self.otp_minutes),
        )


email_client = EmailClient()
