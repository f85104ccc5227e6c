from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import requests
from sqlmodel import Session, select

from conftest import run_concurrently
from intranet.core.config import Settings
from intranet.models import OtpChannel, OtpCode
from intranet.services.otp import OtpService
from intranet.services.results import FailureReason
from intranet.services.sms import REJECTED_SENDER_LABEL, SmsClient

PHONE = "0241234567"


def _configured_sms() -> SmsClient:
    return SmsClient(Settings(SMS_API_KEY="test-key", SMS_SENDER_ID="ARL"))


def _provider_response(status_code=200, label="DS_PENDING"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = {
        "handshake": {"id": 0, "label": "HSHK_OK"},
        "data": {"destinations": [{"to": "233241234567", "status": {"id": 2110, "label": label}}]},
    }
    return response


def test_sms_without_api_key_runs_in_dev_mode():
    result = SmsClient(Settings(SMS_API_KEY="")).send("233241234567", "hello")
    assert result.success
    assert result.dev_mode
    assert result.message_id.startswith("dev-")


def test_sms_unregistered_sender_is_reported():
    with patch("intranet.services.sms.requests.post", return_value=_provider_response(label=REJECTED_SENDER_LABEL)):
        result = _configured_sms().send("233241234567", "hello")
    assert not result.success
    assert result.reason == FailureReason.SENDER_REJECTED
    assert "Unregistered sender" in result.error


def test_sms_transport_error_never_raises():
    with patch("intranet.services.sms.requests.post", side_effect=requests.ConnectionError("boom")):
        result = _configured_sms().send("233241234567", "hello")
    assert not result.success
    assert result.reason == FailureReason.PROVIDER_ERROR


def test_sms_posts_to_provider_with_key_header():
    with patch("intranet.services.sms.requests.post", return_value=_provider_response()) as post:
        result = _configured_sms().send("233241234567", "hello")
    assert result.success
    kwargs = post.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "key test-key"
    assert kwargs["json"]["destinations"] == ["233241234567"]
    assert kwargs["timeout"] > 0


def test_request_otp_in_dev_mode_exposes_code(session):
    service = OtpService(SmsClient(Settings(SMS_API_KEY="")))
    result = service.request_otp(session, PHONE)
    assert result.success
    assert result.dev_code is not None and len(result.dev_code) == 6
    assert result.expires_in == 300

    stored = session.exec(select(OtpCode)).one()
    assert stored.recipient == "233241234567"
    assert stored.channel == OtpChannel.SMS
    # Only the hash is stored
    assert stored.code_hash != result.dev_code


def test_request_otp_rejects_invalid_phone(session):
    result = OtpService(SmsClient(Settings(SMS_API_KEY=""))).request_otp(session, "12345")
    assert not result.success
    assert result.reason == FailureReason.INVALID_INPUT


def test_request_otp_cooldown(session):
    service = OtpService(SmsClient(Settings(SMS_API_KEY="")))
    assert service.request_otp(session, PHONE).success
    second = service.request_otp(session, PHONE)
    assert not second.success
    assert second.reason == FailureReason.RATE_LIMITED


def test_request_otp_hourly_limit(session):
    config = Settings(SMS_API_KEY="", OTP_COOLDOWN_SECONDS=0, OTP_HOURLY_LIMIT=2)
    service = OtpService(SmsClient(config), config)
    assert service.request_otp(session, PHONE).success
    assert service.request_otp(session, PHONE).success
    third = service.request_otp(session, PHONE)
    assert third.reason == FailureReason.RATE_LIMITED


def test_new_code_replaces_the_previous_one(session):
    config = Settings(SMS_API_KEY="", OTP_COOLDOWN_SECONDS=0)
    service = OtpService(SmsClient(config), config)
    first = service.request_otp(session, PHONE).dev_code
    second = service.request_otp(session, PHONE).dev_code

    if first != second:
        assert not service.verify_otp(session, PHONE, first).success
    assert service.verify_otp(session, PHONE, second).success


def test_sms_failure_removes_the_code(session):
    service = OtpService(_configured_sms())
    with patch("intranet.services.sms.requests.post", return_value=_provider_response(label=REJECTED_SENDER_LABEL)):
        result = service.request_otp(session, PHONE)
    assert result.reason == FailureReason.SENDER_REJECTED
    assert session.exec(select(OtpCode)).first() is None


def test_verify_otp_is_single_use(session):
    service = OtpService(SmsClient(Settings(SMS_API_KEY="")))
    code = service.request_otp(session, PHONE).dev_code
    assert service.verify_otp(session, "+233241234567", code).success
    again = service.verify_otp(session, PHONE, code)
    assert again.reason == FailureReason.NOT_FOUND


def test_verify_otp_locks_after_max_attempts(session):
    config = Settings(SMS_API_KEY="", OTP_MAX_ATTEMPTS=3)
    service = OtpService(SmsClient(config), config)
    code = service.request_otp(session, PHONE).dev_code
    wrong = "000000" if code != "000000" else "111111"

    assert service.verify_otp(session, PHONE, wrong).reason == FailureReason.INVALID_INPUT
    assert service.verify_otp(session, PHONE, wrong).reason == FailureReason.INVALID_INPUT
    assert service.verify_otp(session, PHONE, wrong).reason == FailureReason.TOO_MANY_ATTEMPTS
    # The code is gone even if the right one is sent now
    assert service.verify_otp(session, PHONE, code).reason == FailureReason.NOT_FOUND


def test_cleanup_keeps_codes_from_the_last_hour(session):
    now = datetime.utcnow()
    session.add(OtpCode(recipient="233241234567", code_hash="a", expires_at=now - timedelta(hours=2), created_at=now - timedelta(hours=2)))
    session.add(OtpCode(recipient="233241234567", code_hash="b", expires_at=now - timedelta(minutes=1), created_at=now - timedelta(minutes=6)))
    session.commit()

    deleted = OtpService(SmsClient(Settings(SMS_API_KEY=""))).cleanup_expired(session)
    assert deleted == 1
    assert [row.code_hash for row in session.exec(select(OtpCode)).all()] == ["b"]


def test_concurrent_submissions_of_one_code_succeed_once(file_engine):
    service = OtpService(SmsClient(Settings(SMS_API_KEY="")))
    with Session(file_engine) as setup:
        code = service.request_otp(setup, PHONE).dev_code

    def verify():
        with Session(file_engine) as s:
            return service.verify_otp(s, PHONE, code).success

    assert sorted(run_concurrently(verify, count=2)) == [False, True]


def test_concurrent_wrong_codes_all_count_as_attempts(file_engine):
    config = Settings(SMS_API_KEY="", OTP_MAX_ATTEMPTS=10)
    service = OtpService(SmsClient(config), config)
    with Session(file_engine) as setup:
        code = service.request_otp(setup, PHONE).dev_code
    wrong = "000000" if code != "000000" else "111111"

    def verify():
        with Session(file_engine) as s:
            return service.verify_otp(s, PHONE, wrong).reason

    assert run_concurrently(verify, count=4) == [FailureReason.INVALID_INPUT] * 4
    with Session(file_engine) as check:
        assert check.exec(select(OtpCode)).one().attempts == 4
