import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from intranet.api.deps import CurrentAdmin, PushServiceDep, get_optional_user
from intranet.core.celery_utils import safe_celery_delay
from intranet.db import SessionDep
from intranet.models import User
from intranet.schemas import PushSubscriptionCreate, PushSubscriptionRead, PushTestRequest, PushUnsubscribe
from intranet.services.web_push import PushPayload, remove_subscription, save_subscription
from intranet.tasks.push import broadcast_push_task

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vapid-public-key")
def get_vapid_public_key(push_service: PushServiceDep) -> dict:
    """VAPID public key the browser needs to subscribe."""
    if not push_service.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications not configured",
        )
    return {"publicKey": push_service.config.public_key}


@router.post("/subscribe", response_model=PushSubscriptionRead, status_code=status.HTTP_201_CREATED)
def subscribe_to_push(
    *,
    session: SessionDep,
    payload: PushSubscriptionCreate,
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Store the browser subscription. Signed-in users are linked to it."""
    return save_subscription(
        session,
        payload.endpoint,
        payload.keys.model_dump(),
        user_id=current_user.id if current_user else None,
    )


@router.post("/unsubscribe")
def unsubscribe_from_push(*, session: SessionDep, payload: PushUnsubscribe) -> dict:
    removed = remove_subscription(session, payload.endpoint)
    return {"message": "Unsubscribed successfully", "removed": removed}


@router.post("/test", status_code=status.HTTP_202_ACCEPTED)
def send_test_push(
    *,
    payload: PushTestRequest,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> dict:
    """Fan out a test notification to every subscriber."""
    if not push_service.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications not configured",
        )
    background_tasks.add_task(
        push_service.send_to_all,
        PushPayload(title=payload.title, body=payload.body, url=payload.url),
    )
    logger.info("Test push queued by admin %s", current_admin.email)
    return {"message": "Test notification queued"}


@router.post("/broadcast", status_code=status.HTTP_202_ACCEPTED)
def broadcast_push(
    *,
    payload: PushTestRequest,
    background_tasks: BackgroundTasks,
    push_service: PushServiceDep,
    current_admin: CurrentAdmin,
) -> dict:
    """Queue a custom announcement on the Celery worker, or run it in-process without a broker."""
    if not push_service.is_configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Push notifications not configured",
        )
    queued = safe_celery_delay(broadcast_push_task, payload.title, payload.body, payload.url)
    if queued is None:
        background_tasks.add_task(
            push_service.send_to_all,
            PushPayload(title=payload.title, body=payload.body, url=payload.url),
        )
    logger.info("Broadcast %r requested by admin %s", payload.title, current_admin.email)
    return {"message": "Notification queued", "worker": queued is not None}
