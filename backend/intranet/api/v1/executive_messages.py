from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import ExecutiveMessageCreate, ExecutiveMessageRead, ExecutiveMessageUpdate
from intranet.services import executive_messages

router = APIRouter()


@router.get("/", response_model=list[ExecutiveMessageRead])
def list_messages(session: SessionDep) -> list[ExecutiveMessageRead]:
    return [ExecutiveMessageRead.model_validate(m) for m in executive_messages.list_messages(session)]


@router.get("/all", response_model=list[ExecutiveMessageRead])
def list_all_messages(session: SessionDep, current_admin: CurrentAdmin) -> list[ExecutiveMessageRead]:
    return [
        ExecutiveMessageRead.model_validate(m)
        for m in executive_messages.list_messages(session, active_only=False)
    ]


@router.post("/", response_model=ExecutiveMessageRead, status_code=status.HTTP_201_CREATED)
def create_message(
    payload: ExecutiveMessageCreate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> ExecutiveMessageRead:
    return ExecutiveMessageRead.model_validate(executive_messages.create_message(session, payload.model_dump()))


@router.patch("/{message_id}", response_model=ExecutiveMessageRead)
def update_message(
    message_id: UUID,
    payload: ExecutiveMessageUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> ExecutiveMessageRead:
    message = executive_messages.update_message(session, message_id, payload.model_dump(exclude_unset=True))
    if message is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Executive message not found")
    return ExecutiveMessageRead.model_validate(message)


@router.delete("/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_message(message_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not executive_messages.delete_message(session, message_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Executive message not found")
