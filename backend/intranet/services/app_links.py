from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import Session, select

from intranet.models import AppLink


def list_app_links(session: Session, active_only: bool = True) -> list[AppLink]:
    statement = select(AppLink)
    if active_only:
        statement = statement.where(AppLink.is_active == True)  # noqa: E712
    return list(session.exec(statement.order_by(AppLink.order, AppLink.name)).all())


def create_app_link(session: Session, data: dict[str, Any]) -> AppLink:
    link = AppLink(**data)
    session.add(link)
    session.commit()
    session.refresh(link)
    return link


def update_app_link(session: Session, link_id: UUID, data: dict[str, Any]) -> Optional[AppLink]:
    link = session.get(AppLink, link_id)
    if link is None:
        return None
    for key, value in data.items():
        setattr(link, key, value)
    link.touch()
    session.add(link)
    session.commit()
    session.refresh(link)
    return link


def delete_app_link(session: Session, link_id: UUID) -> bool:
    link = session.get(AppLink, link_id)
    if link is None:
        return False
    session.delete(link)
    session.commit()
    return True


def record_click(session: Session, link_id: UUID) -> bool:
    """Increment the click counter in the database, not in Python."""
    result = session.execute(update(AppLink).where(AppLink.id == link_id).values(clicks=AppLink.clicks + 1))
    session.commit()
    return bool(result.rowcount)
