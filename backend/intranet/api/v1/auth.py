import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from intranet.api.deps import CurrentUser, EmailOtpServiceDep, OtpServiceDep, get_token_payload
from intranet.core.config import settings
from intranet.core.limiter import get_client_ip, limiter
from intranet.db import SessionDep
from intranet.schemas import (
    EmailOtpRequest,
    EmailOtpVerifyRequest,
    LogoutRequest,
    OtpRequest,
    OtpRequestResponse,
    OtpVerifyRequest,
    RefreshTokenRequest,
    SessionRead,
    TokenPair,
    UserRead,
    UserWithTokens,
)
from intranet.services import tokens, user_auth
from intranet.services.results import FailureReason

logger = logging.getLogger(__name__)

router = APIRouter()

# SMS and email provider failures are upstream errors, everything else is the caller's
_OTP_REQUEST_STATUS = {
    FailureReason.SENDER_REJECTED: status.HTTP_502_BAD_GATEWAY,
    FailureReason.PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def _device_info(request: Request) -> str | None:
    return request.headers.get("user-agent")


def _token_pair(pair) -> TokenPair:
    return TokenPair(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        token_type=pair.token_type,
        expires_in=pair.expires_in,
    )


def _otp_response(result) -> OtpRequestResponse:
    if not result.success:
        raise HTTPException(
            status_code=_OTP_REQUEST_STATUS.get(result.reason, status.HTTP_400_BAD_REQUEST),
            detail=result.message,
        )

    # The generated code is only echoed back in local development without provider credentials
    dev_code = result.dev_code if settings.ENVIRONMENT == "local" else None
    return OtpRequestResponse(message=result.message, expires_in=result.expires_in, dev_code=dev_code)


@router.post(
    "/otp/request",
    response_model=OtpRequestResponse,
    summary="Send a sign-in code by SMS",
)
@limiter.limit(settings.OTP_RATE_LIMIT)
def request_otp(request: Request, payload: OtpRequest, session: SessionDep, otp: OtpServiceDep) -> OtpRequestResponse:
    result = user_auth.request_login_otp(session, otp, payload.phone)
    return _otp_response(result)


@router.post(
    "/otp/verify",
    response_model=UserWithTokens,
    summary="Verify the code and obtain tokens",
)
def verify_otp(request: Request, payload: OtpVerifyRequest, session: SessionDep, otp: OtpServiceDep) -> UserWithTokens:
    result = user_auth.authenticate_by_phone_otp(
        session,
        otp,
        payload.phone,
        payload.otp,
        device_info=_device_info(request),
        ip_address=get_client_ip(request),
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
        )
    return UserWithTokens(user=UserRead.model_validate(result.user), tokens=_token_pair(result.tokens))


@router.post(
    "/email-otp/request",
    response_model=OtpRequestResponse,
    summary="Send a sign-in code by email",
)
@limiter.limit(settings.OTP_RATE_LIMIT)
def request_email_otp(
    request: Request,
    payload: EmailOtpRequest,
    session: SessionDep,
    otp: EmailOtpServiceDep,
) -> OtpRequestResponse:
    result = user_auth.request_login_email_otp(session, otp, payload.email)
    return _otp_response(result)


@router.post(
    "/email-otp/verify",
    response_model=UserWithTokens,
    summary="Verify an emailed code and obtain tokens",
)
def verify_email_otp(
    request: Request,
    payload: EmailOtpVerifyRequest,
    session: SessionDep,
    otp: EmailOtpServiceDep,
) -> UserWithTokens:
    result = user_auth.authenticate_by_email_otp(
        session,
        otp,
        payload.email,
        payload.otp,
        device_info=_device_info(request),
        ip_address=get_client_ip(request),
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.message,
        )
    return UserWithTokens(user=UserRead.model_validate(result.user), tokens=_token_pair(result.tokens))


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Rotate the refresh token",
)
def refresh_tokens(request: Request, payload: RefreshTokenRequest, session: SessionDep) -> TokenPair:
    result = tokens.rotate_refresh_token(
        session,
        payload.refresh_token,
        device_info=_device_info(request),
        ip_address=get_client_ip(request),
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=tokens.INVALID_REFRESH_MESSAGE,
        )
    return _token_pair(result.tokens)


@router.post("/logout", summary="Log out this device")
def logout(
    session: SessionDep,
    current_user: CurrentUser,
    payload: LogoutRequest | None = None,
    token_payload: dict[str, Any] = Depends(get_token_payload),
) -> dict[str, str]:
    tokens.blacklist_access_token(session, token_payload)
    if payload and payload.refresh_token:
        tokens.revoke_refresh_token(session, payload.refresh_token)
    logger.info("User %s logged out", current_user.id)
    return {"message": "Logged out"}


@router.post("/logout-all", summary="Log out every device")
def logout_all(
    session: SessionDep,
    current_user: CurrentUser,
    token_payload: dict[str, Any] = Depends(get_token_payload),
) -> dict[str, Any]:
    tokens.blacklist_access_token(session, token_payload)
    revoked = tokens.revoke_all_user_tokens(session, current_user.id)
    return {"message": "Logged out from all devices", "revoked": revoked}


@router.get("/me", response_model=UserRead, summary="Current portal user")
def read_me(current_user: CurrentUser) -> UserRead:
    return UserRead.model_validate(current_user)


@router.get("/sessions", response_model=list[SessionRead], summary="Active device sessions")
def list_sessions(session: SessionDep, current_user: CurrentUser) -> list[SessionRead]:
    return [SessionRead.model_validate(row) for row in tokens.list_active_sessions(session, current_user.id)]


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Revoke a device session")
def revoke_session(session_id: UUID, session: SessionDep, current_user: CurrentUser) -> None:
    if not tokens.revoke_session(session, current_user.id, session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
