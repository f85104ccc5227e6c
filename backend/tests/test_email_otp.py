from unittest.mock import MagicMock, patch

import requests
from sqlmodel import select

from intranet.core.config import Settings
from intranet.models import OtpChannel, OtpCode, User
from intranet.services.email import EmailClient, is_valid_email, mask_email, normalize_email
from intranet.services.otp import EmailOtpService, OtpService, email_otp_service
from intranet.services.results import FailureReason
from intranet.services.sms import SmsClient

API = "/api/v1/auth"
EMAIL = "kwame.mensah@arl.com"


def _configured_email() -> EmailClient:
    return EmailClient(Settings(EMAIL_API_KEY="re_test", EMAIL_FROM="it@arl.com", EMAIL_FROM_NAME="ARL IT"))


def _provider_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = payload if payload is not None else {"id": "msg_123"}
    return response


def test_email_helpers():
    assert normalize_email("  Kwame.Mensah@ARL.com ") == EMAIL
    assert is_valid_email("Kwame.Mensah@ARL.com")
    assert not is_valid_email("kwame@arl")
    assert not is_valid_email(None)
    assert mask_email(EMAIL) == "kw***@arl.com"


def test_email_without_api_key_runs_in_dev_mode():
    result = EmailClient(Settings(EMAIL_API_KEY="")).send_otp(EMAIL, "123456")
    assert result.success
    assert result.dev_mode
    assert result.message_id.startswith("dev-")


def test_email_client_posts_to_provider():
    with patch("intranet.services.email.requests.post", return_value=_provider_response()) as post:
        result = _configured_email().send_otp(EMAIL, "482913")

    assert result.success
    assert result.message_id == "msg_123"
    kwargs = post.call_args.kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer re_test"
    assert kwargs["json"]["from"] == "ARL IT <it@arl.com>"
    assert kwargs["json"]["to"] == [EMAIL]
    assert "482913" in kwargs["json"]["text"]
    assert "482913" in kwargs["json"]["html"]


def test_email_provider_errors_are_reported():
    rejected = _provider_response(422, {"message": "Invalid `to` field"})
    with patch("intranet.services.email.requests.post", return_value=rejected):
        result = _configured_email().send(EMAIL, "subject", "<p>x</p>")
    assert not result.success
    assert result.reason == FailureReason.PROVIDER_ERROR
    assert result.error == "Invalid `to` field"

    with patch("intranet.services.email.requests.post", side_effect=requests.Timeout("slow")):
        result = _configured_email().send(EMAIL, "subject", "<p>x</p>")
    assert result.reason == FailureReason.PROVIDER_ERROR


def test_email_code_is_stored_for_normalized_address(session):
    service = EmailOtpService(EmailClient(Settings(EMAIL_API_KEY="")))
    result = service.request_otp(session, " Kwame.Mensah@ARL.com")
    assert result.success
    assert len(result.dev_code) == 6

    stored = session.exec(select(OtpCode)).one()
    assert stored.channel == OtpChannel.EMAIL
    assert stored.recipient == EMAIL
    assert service.verify_otp(session, EMAIL.upper(), result.dev_code).success


def test_email_and_sms_codes_do_not_share_cooldown(session):
    email_service = EmailOtpService(EmailClient(Settings(EMAIL_API_KEY="")))
    sms_service = OtpService(SmsClient(Settings(SMS_API_KEY="")))

    assert email_service.request_otp(session, EMAIL).success
    assert sms_service.request_otp(session, "0241234567").success
    assert email_service.request_otp(session, EMAIL).reason == FailureReason.RATE_LIMITED


def test_invalid_email_is_rejected(session):
    result = EmailOtpService(EmailClient(Settings(EMAIL_API_KEY=""))).request_otp(session, "not-an-email")
    assert result.reason == FailureReason.INVALID_INPUT


def test_email_login_marks_email_verified(client, session, portal_user):
    requested = client.post(f"{API}/email-otp/request", json={"email": "Kwame.Mensah@arl.com"})
    assert requested.status_code == 200
    code = requested.json()["dev_code"]

    response = client.post(f"{API}/email-otp/verify", json={"email": EMAIL, "otp": code})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["email_verified"] is True
    assert body["user"]["login_count"] == 1
    assert body["tokens"]["refresh_token"]
    session.expire_all()
    assert session.get(User, portal_user.id).email_verified is True


def test_email_otp_for_unknown_address_is_rejected(client, portal_user):
    response = client.post(f"{API}/email-otp/request", json={"email": "nobody@arl.com"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Email not registered"


def test_email_otp_wrong_code_is_unauthorized(client, portal_user):
    code = client.post(f"{API}/email-otp/request", json={"email": EMAIL}).json()["dev_code"]
    wrong = "000000" if code != "000000" else "111111"
    response = client.post(f"{API}/email-otp/verify", json={"email": EMAIL, "otp": wrong})
    assert response.status_code == 401


def test_email_otp_provider_failure_is_bad_gateway(client, portal_user, monkeypatch):
    monkeypatch.setattr(email_otp_service, "sender", _configured_email())
    with patch("intranet.services.email.requests.post", side_effect=requests.ConnectionError("down")):
        response = client.post(f"{API}/email-otp/request", json={"email": EMAIL})
    assert response.status_code == 502
