from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlmodel import Session, select

from intranet.models import ExecutiveMessage


def list_messages(session: Session, active_only: bool = True) -> list[ExecutiveMessage]:
    statement = select(ExecutiveMessage)
    if active_only:
        statement = statement.where(ExecutiveMessage.is_active == True)  # noqa: E712
    return list(session.exec(statement.order_by(ExecutiveMessage.order, ExecutiveMessage.created_at)).all())


def create_message(session: Session, data: dict[str, Any]) -> ExecutiveMessage:
    message = ExecutiveMessage(**data)
    session.add(message)
    session.commit()
    session.refresh(message)
    return message


def update_message(session: Session, message_id: UUID, data: dict[str, Any]) -> Optional[ExecutiveMessage]:
    message = session.get(ExecutiveMessage, message_id)
    if message is None:
        return None
    for key, value in data.items():
        setattr(message, key, value)
    message.touch()
    session.add(message)
    session.commit()
    session.refresh(message)
    return message


def delete_message(session: Session, message_id: UUID) -> bool:
    message = session.get(ExecutiveMessage, message_id)
    if message is None:
        return False
    session.delete(message)
    session.commit()
    return True
