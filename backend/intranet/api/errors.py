from __future__ import annotations

from fastapi import HTTPException, status

from intranet.services.results import FailureReason, ServiceResult

FAILURE_STATUS = {
    FailureReason.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    FailureReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.CONFLICT: status.HTTP_409_CONFLICT,
    FailureReason.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    FailureReason.SENDER_REJECTED: status.HTTP_502_BAD_GATEWAY,
    FailureReason.PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def raise_for_result(result: ServiceResult) -> None:
    """Turn a failed service result into an HTTPException."""
    if result.success:
        return
    raise HTTPException(
        status_code=FAILURE_STATUS.get(result.reason, status.HTTP_400_BAD_REQUEST),
        detail=result.message,
    )
