"""Anonymous suggestion box and its categories."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from intranet.models import Suggestion, SuggestionCategory
from intranet.models.suggestion import SuggestionStatus
from intranet.services.results import FailureReason, ServiceResult
from intranet.services.slugs import unique_slug

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 2000


# === CATEGORIES ===


def list_categories(session: Session, active_only: bool = True) -> list[SuggestionCategory]:
    statement = select(SuggestionCategory)
    if active_only:
        statement = statement.where(SuggestionCategory.is_active == True)  # noqa: E712
    return list(session.exec(statement.order_by(SuggestionCategory.order, SuggestionCategory.name)).all())


def create_category(session: Session, data: dict[str, Any]) -> SuggestionCategory:
    category = SuggestionCategory(**data, slug=unique_slug(session, SuggestionCategory, data["name"]))
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def update_category(session: Session, category_id: UUID, data: dict[str, Any]) -> Optional[SuggestionCategory]:
    category = session.get(SuggestionCategory, category_id)
    if category is None:
        return None
    name_changed = "name" in data and data["name"] != category.name
    for key, value in data.items():
        setattr(category, key, value)
    if name_changed:
        category.slug = unique_slug(session, SuggestionCategory, category.name, exclude_id=category.id)
    category.touch()
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def delete_category(session: Session, category_id: UUID) -> ServiceResult:
    category = session.get(SuggestionCategory, category_id)
    if category is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Category not found")
    in_use = session.exec(
        select(func.count()).select_from(Suggestion).where(Suggestion.category_id == category_id)
    ).one()
    if in_use:
        return ServiceResult.fail(
            FailureReason.CONFLICT,
            f"Category has {in_use} suggestions. Deactivate it instead",
        )
    session.delete(category)
    session.commit()
    return ServiceResult.ok("Category deleted")


# === SUGGESTIONS ===


def submit_suggestion(session: Session, content: str, category_id: UUID) -> ServiceResult:
    content = (content or "").strip()
    if not MIN_CONTENT_LENGTH <= len(content) <= MAX_CONTENT_LENGTH:
        return ServiceResult.fail(
            FailureReason.INVALID_INPUT,
            f"Suggestion must be between {MIN_CONTENT_LENGTH} and {MAX_CONTENT_LENGTH} characters",
        )
    category = session.get(SuggestionCategory, category_id)
    if category is None or not category.is_active:
        return ServiceResult.fail(FailureReason.INVALID_INPUT, "Please select a valid category")

    suggestion = Suggestion(content=content, category_id=category_id)
    session.add(suggestion)
    session.commit()
    session.refresh(suggestion)
    logger.info("Suggestion %s submitted in category %s", suggestion.id, category.slug)
    return ServiceResult.ok("Thank you for your suggestion", data=suggestion)


def get_suggestion(session: Session, suggestion_id: UUID) -> Optional[Suggestion]:
    return session.get(Suggestion, suggestion_id)


def date_range_filters(start_date: Optional[date], end_date: Optional[date]) -> list:
    filters = []
    if start_date:
        filters.append(Suggestion.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        filters.append(Suggestion.created_at < datetime.combine(end_date + timedelta(days=1), time.min))
    return filters


def list_suggestions(
    session: Session,
    *,
    status: Optional[str] = None,
    category_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Suggestion], int]:
    filters = date_range_filters(start_date, end_date)
    if status:
        filters.append(Suggestion.status == status)
    if category_id:
        filters.append(Suggestion.category_id == category_id)

    total = session.exec(select(func.count()).select_from(Suggestion).where(*filters)).one()
    statement = (
        select(Suggestion).where(*filters).order_by(Suggestion.created_at.desc()).offset(skip).limit(limit)
    )
    return list(session.exec(statement).all()), total


def update_suggestion(
    session: Session,
    suggestion_id: UUID,
    data: dict[str, Any],
    reviewed_by: Optional[UUID] = None,
) -> Optional[Suggestion]:
    """Change status and/or admin notes. Marks the suggestion as reviewed."""
    suggestion = session.get(Suggestion, suggestion_id)
    if suggestion is None:
        return None
    if data.get("status"):
        suggestion.status = data["status"]
    if "admin_notes" in data:
        suggestion.admin_notes = data["admin_notes"]
    suggestion.reviewed_at = datetime.utcnow()
    suggestion.reviewed_by = reviewed_by
    suggestion.touch()
    session.add(suggestion)
    session.commit()
    session.refresh(suggestion)
    return suggestion


def delete_suggestion(session: Session, suggestion_id: UUID) -> bool:
    suggestion = session.get(Suggestion, suggestion_id)
    if suggestion is None:
        return False
    session.delete(suggestion)
    session.commit()
    return True


def count_new(session: Session) -> int:
    return session.exec(
        select(func.count()).select_from(Suggestion).where(Suggestion.status == SuggestionStatus.NEW)
    ).one()


def serialize_suggestion(suggestion: Suggestion, categories: dict[UUID, str]) -> dict[str, Any]:
    return {
        "id": suggestion.id,
        "content": suggestion.content,
        "category_id": suggestion.category_id,
        "category_name": categories.get(suggestion.category_id) if suggestion.category_id else None,
        "status": suggestion.status,
        "admin_notes": suggestion.admin_notes,
        "reviewed_by": suggestion.reviewed_by,
        "reviewed_at": suggestion.reviewed_at,
        "created_at": suggestion.created_at,
    }


def category_names(session: Session) -> dict[UUID, str]:
    return {c.id: c.name for c in session.exec(select(SuggestionCategory)).all()}
