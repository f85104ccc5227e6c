from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlmodel import Session, select

from intranet.models import ITTip


def list_tips(
    session: Session,
    category: Optional[str] = None,
    active_only: bool = True,
    limit: Optional[int] = None,
) -> list[ITTip]:
    """Pinned tips first, then by order, newest first."""
    statement = select(ITTip)
    if active_only:
        statement = statement.where(ITTip.is_active == True)  # noqa: E712
    if category:
        statement = statement.where(ITTip.category == category)
    statement = statement.order_by(ITTip.is_pinned.desc(), ITTip.order, ITTip.created_at.desc())
    if limit:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def create_tip(session: Session, data: dict[str, Any]) -> ITTip:
    tip = ITTip(**data)
    session.add(tip)
    session.commit()
    session.refresh(tip)
    return tip


def update_tip(session: Session, tip_id: UUID, data: dict[str, Any]) -> Optional[ITTip]:
    tip = session.get(ITTip, tip_id)
    if tip is None:
        return None
    for key, value in data.items():
        setattr(tip, key, value)
    tip.touch()
    session.add(tip)
    session.commit()
    session.refresh(tip)
    return tip


def delete_tip(session: Session, tip_id: UUID) -> bool:
    tip = session.get(ITTip, tip_id)
    if tip is None:
        return False
    session.delete(tip)
    session.commit()
    return True
