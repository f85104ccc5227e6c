"""SMS delivery through the smsonlinegh.com HTTP API."""

from __future__ import annotations

import logging
import time
from typing import Optional

import requests

from intranet.core.config import Settings, settings
from intranet.services.phone import mask_phone
from intranet.services.results import FailureReason, SmsResult

logger = logging.getLogger(__name__)

REJECTED_SENDER_LABEL = "DS_REJECTED_SENDER_UNREGISTERED"
OTP_MESSAGE = "Your ARL Intranet verification code is: {code}. Valid for 5 minutes. Do not share this code."


class SmsClient:
    def __init__(self, config: Optional[Settings] = None):
        config = config or settings
        self.api_key = config.SMS_API_KEY
        self.sender_id = config.SMS_SENDER_ID
        self.base_url = config.SMS_BASE_URL
        self.timeout = config.SMS_TIMEOUT_SECONDS

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, phone: str, message: str) -> SmsResult:
        """Send a plain-text SMS. Never raises."""
        if not self.is_configured:
            logger.warning("SMS_API_KEY not set, SMS to %s not sent: %s", phone, message)
            return SmsResult(success=True, message_id=f"dev-{int(time.time() * 1000)}", dev_mode=True)

        try:
            response = requests.post(
                self.base_url,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Authorization": f"key {self.api_key}",
                },
                json={
                    "sender": self.sender_id,
                    "type": 0,  # Plain text
                    "destinations": [phone],
                    "text": message,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("SMS sending error for %s: %s", mask_phone(phone), e)
            return SmsResult(success=False, error=str(e), reason=FailureReason.PROVIDER_ERROR)

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        destinations = (data.get("data") or {}).get("destinations") or [{}]
        destination = destinations[0] if isinstance(destinations[0], dict) else {}
        status_label = (destination.get("status") or {}).get("label")
        if status_label == REJECTED_SENDER_LABEL:
            logger.error("SMS rejected: unregistered sender %r", self.sender_id)
            return SmsResult(
                success=False,
                error="Failed to send SMS: Unregistered sender",
                reason=FailureReason.SENDER_REJECTED,
            )

        if response.ok:
            logger.info("SMS sent to %s (status=%s)", mask_phone(phone), status_label)
            return SmsResult(success=True, message_id=data.get("messageId"))

        error = data.get("message") or "Failed to send SMS"
        logger.error("SMS provider returned %s: %s", response.status_code, error)
        return SmsResult(success=False, error=error, reason=FailureReason.PROVIDER_ERROR)

    def send_otp(self, phone: str, code: str) -> SmsResult:
        return self.send(phone, OTP_MESSAGE.format(code=code))


sms_client = SmsClient()
