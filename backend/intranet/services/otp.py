"""One-time sign-in codes delivered by SMS or email."""

from __future__ import annotations

import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Protocol

from sqlalchemy import delete, func, update
from sqlmodel import Session, select

from intranet.core.config import Settings, settings
from intranet.core.security import hash_token_id
from intranet.models import OtpChannel, OtpCode
from intranet.services.email import email_client, is_valid_email, mask_email, normalize_email
from intranet.services.phone import is_valid_phone, mask_phone, normalize_phone
from intranet.services.results import FailureReason, OtpResult
from intranet.services.sms import sms_client

logger = logging.getLogger(__name__)


class CodeSender(Protocol):
    def send_otp(self, recipient: str, code: str):
        """Deliver the code. Returns an SmsResult or EmailResult."""


def generate_code(length: int) -> str:
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


class OtpService:
    """Issues and checks OTP codes sent by SMS.

    Codes are stored hashed. Issuing a new code expires the previous one, and
    expired rows stay until the cleanup task removes them so the hourly limit
    can count them. Consuming a code and counting a failed attempt are single
    conditional UPDATEs, so concurrent submissions of one code succeed once.
    """

    channel = OtpChannel.SMS
    invalid_message = "Invalid Ghana phone number"
    sent_message = "Verification code sent"

    def __init__(self, sender: CodeSender, config: Optional[Settings] = None):
        self.sender = sender
        self.config = config or settings

    def normalize(self, raw: Optional[str]) -> str:
        return normalize_phone(raw)

    def is_valid(self, raw: Optional[str]) -> bool:
        return is_valid_phone(raw)

    def mask(self, recipient: str) -> str:
        return mask_phone(recipient)

    def _codes(self, recipient: str):
        return select(OtpCode).where(OtpCode.channel == self.channel, OtpCode.recipient == recipient)

    def request_otp(self, session: Session, raw_recipient: str) -> OtpResult:
        if not self.is_valid(raw_recipient):
            return OtpResult(False, self.invalid_message, FailureReason.INVALID_INPUT)

        recipient = self.normalize(raw_recipient)
        now = datetime.utcnow()

        latest = session.exec(self._codes(recipient).order_by(OtpCode.created_at.desc())).first()
        if latest is not None:
            elapsed = (now - latest.created_at).total_seconds()
            if elapsed < self.config.OTP_COOLDOWN_SECONDS:
                wait = int(self.config.OTP_COOLDOWN_SECONDS - elapsed) + 1
                return OtpResult(
                    False,
                    f"Please wait {wait} seconds before requesting a new code",
                    FailureReason.RATE_LIMITED,
                )

        sent_last_hour = session.exec(
            select(func.count())
            .select_from(OtpCode)
            .where(
                OtpCode.channel == self.channel,
                OtpCode.recipient == recipient,
                OtpCode.created_at > now - timedelta(hours=1),
            )
        ).one()
        if sent_last_hour >= self.config.OTP_HOURLY_LIMIT:
            return OtpResult(
                False,
                "Too many code requests. Please try again later",
                FailureReason.RATE_LIMITED,
            )

        # Previous codes stop working once a new one is issued
        for old in session.exec(self._codes(recipient).where(OtpCode.expires_at > now)).all():
            old.expires_at = now
            session.add(old)

        code = generate_code(self.config.OTP_LENGTH)
        otp = OtpCode(
            channel=self.channel,
            recipient=recipient,
            code_hash=hash_token_id(code),
            expires_at=now + timedelta(minutes=self.config.OTP_EXPIRY_MINUTES),
            created_at=now,
        )
        session.add(otp)
        session.commit()

        sent = self.sender.send_otp(recipient, code)
        if not sent.success:
            session.delete(otp)
            session.commit()
            logger.error("OTP delivery to %s failed: %s", self.mask(recipient), sent.error)
            return OtpResult(
                False,
                sent.error or "Failed to send verification code",
                sent.reason or FailureReason.PROVIDER_ERROR,
            )

        expires_in = self.config.OTP_EXPIRY_MINUTES * 60
        if sent.dev_mode:
            logger.warning("Dev OTP for %s: %s", recipient, code)
            return OtpResult(True, "Verification code generated", expires_in=expires_in, dev_code=code)

        logger.info("OTP sent to %s by %s", self.mask(recipient), self.channel.value)
        return OtpResult(True, self.sent_message, expires_in=expires_in)

    def verify_otp(self, session: Session, raw_recipient: str, code: str) -> OtpResult:
        recipient = self.normalize(raw_recipient)
        now = datetime.utcnow()
        missing = OtpResult(False, "Code expired or not found. Please request a new one", FailureReason.NOT_FOUND)

        otp = session.exec(
            self._codes(recipient).where(OtpCode.expires_at > now).order_by(OtpCode.created_at.desc())
        ).first()
        if otp is None:
            return missing
        otp_id = otp.id

        if not hmac.compare_digest(otp.code_hash, hash_token_id((code or "").strip())):
            session.execute(update(OtpCode).where(OtpCode.id == otp_id).values(attempts=OtpCode.attempts + 1))
            session.commit()
            attempts = session.exec(select(OtpCode.attempts).where(OtpCode.id == otp_id)).first()
            if attempts is None:
                return missing
            if attempts >= self.config.OTP_MAX_ATTEMPTS:
                session.execute(delete(OtpCode).where(OtpCode.id == otp_id))
                session.commit()
                logger.warning("OTP for %s deleted after too many attempts", self.mask(recipient))
                return OtpResult(
                    False,
                    "Too many failed attempts. Please request a new code",
                    FailureReason.TOO_MANY_ATTEMPTS,
                )
            remaining = self.config.OTP_MAX_ATTEMPTS - attempts
            return OtpResult(False, f"Invalid code. {remaining} attempts remaining", FailureReason.INVALID_INPUT)

        # Single use
        result = session.execute(
            update(OtpCode).where(OtpCode.id == otp_id, OtpCode.expires_at > now).values(expires_at=now)
        )
        session.commit()
        if result.rowcount != 1:
            return missing
        return OtpResult(True, "Code verified")

    def cleanup_expired(self, session: Session) -> int:
        """Delete expired codes, of every channel, that no longer count towards the hourly limit."""
        now = datetime.utcnow()
        result = session.execute(
            delete(OtpCode).where(OtpCode.expires_at <= now, OtpCode.created_at <= now - timedelta(hours=1))
        )
        session.commit()
        return result.rowcount or 0


class EmailOtpService(OtpService):
    """Backup sign-in codes sent by email."""

    channel = OtpChannel.EMAIL
    invalid_message = "Invalid email address"
    sent_message = "Verification code sent to your email"

    def normalize(self, raw: Optional[str]) -> str:
        return normalize_email(raw)

    def is_valid(self, raw: Optional[str]) -> bool:
        return is_valid_email(raw)

    def mask(self, recipient: str) -> str:
        return mask_email(recipient)


otp_service = OtpService(sms_client)
email_otp_service = EmailOtpService(email_client)
