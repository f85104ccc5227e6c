"""Company policies and their categories."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from intranet.models import Policy, PolicyCategory
from intranet.models.news import ContentStatus
from intranet.services.results import FailureReason, ServiceResult
from intranet.services.slugs import make_excerpt, unique_slug

logger = logging.getLogger(__name__)


# === CATEGORIES ===


def list_categories(session: Session, active_only: bool = True) -> list[PolicyCategory]:
    statement = select(PolicyCategory)
    if active_only:
        statement = statement.where(PolicyCategory.is_active == True)  # noqa: E712
    return list(session.exec(statement.order_by(PolicyCategory.order, PolicyCategory.name)).all())


def get_category_by_slug(session: Session, slug: str) -> Optional[PolicyCategory]:
    return session.exec(select(PolicyCategory).where(PolicyCategory.slug == slug.lower())).first()


def create_category(session: Session, data: dict[str, Any]) -> PolicyCategory:
    data = dict(data)
    if data.get("order") is None:
        # New categories go last
        highest = session.exec(select(func.max(PolicyCategory.order))).one()
        data["order"] = 0 if highest is None else highest + 1
    category = PolicyCategory(**data, slug=unique_slug(session, PolicyCategory, data["name"]))
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def update_category(session: Session, category_id: UUID, data: dict[str, Any]) -> Optional[PolicyCategory]:
    category = session.get(PolicyCategory, category_id)
    if category is None:
        return None
    name_changed = "name" in data and data["name"] != category.name
    for key, value in data.items():
        setattr(category, key, value)
    if name_changed:
        category.slug = unique_slug(session, PolicyCategory, category.name, exclude_id=category.id)
    category.touch()
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def delete_category(session: Session, category_id: UUID) -> ServiceResult:
    category = session.get(PolicyCategory, category_id)
    if category is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Category not found")
    in_use = session.exec(select(func.count()).select_from(Policy).where(Policy.category_id == category_id)).one()
    if in_use:
        return ServiceResult.fail(
            FailureReason.CONFLICT,
            f"Cannot delete category with {in_use} policies. Move or delete them first",
        )
    session.delete(category)
    session.commit()
    return ServiceResult.ok("Category deleted")


def reorder_categories(session: Session, category_ids: list[UUID]) -> ServiceResult:
    """Set each category's order to its position in ``category_ids``."""
    categories = {c.id: c for c in session.exec(select(PolicyCategory).where(PolicyCategory.id.in_(category_ids)))}
    missing = [str(cid) for cid in category_ids if cid not in categories]
    if missing:
        return ServiceResult.fail(FailureReason.NOT_FOUND, f"Unknown categories: {', '.join(missing)}")
    for position, category_id in enumerate(category_ids):
        category = categories[category_id]
        category.order = position
        category.touch()
        session.add(category)
    session.commit()
    return ServiceResult.ok("Categories reordered")


# === POLICIES ===


def _apply_publish_state(policy: Policy) -> None:
    # published_at is set once, on the first publish
    if policy.status == ContentStatus.PUBLISHED and policy.published_at is None:
        policy.published_at = datetime.utcnow()


def _check_category(session: Session, category_id: UUID) -> Optional[ServiceResult]:
    if session.get(PolicyCategory, category_id) is None:
        return ServiceResult.fail(FailureReason.INVALID_INPUT, "Please select a valid category")
    return None


def create_policy(session: Session, data: dict[str, Any], created_by: Optional[UUID] = None) -> ServiceResult:
    invalid = _check_category(session, data["category_id"])
    if invalid is not None:
        return invalid

    data = dict(data)
    if not data.get("excerpt"):
        data["excerpt"] = make_excerpt(data.get("content") or "")
    policy = Policy(
        **data,
        slug=unique_slug(session, Policy, data["title"]),
        created_by=created_by,
        updated_by=created_by,
    )
    _apply_publish_state(policy)
    session.add(policy)
    session.commit()
    session.refresh(policy)
    logger.info("Policy %s created (status=%s)", policy.slug, policy.status)
    return ServiceResult.ok(data=policy)


def update_policy(
    session: Session,
    policy_id: UUID,
    data: dict[str, Any],
    updated_by: Optional[UUID] = None,
) -> ServiceResult:
    policy = session.get(Policy, policy_id)
    if policy is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Policy not found")
    if data.get("category_id") is not None:
        invalid = _check_category(session, data["category_id"])
        if invalid is not None:
            return invalid

    title_changed = "title" in data and data["title"] != policy.title
    for key, value in data.items():
        setattr(policy, key, value)
    if title_changed:
        policy.slug = unique_slug(session, Policy, policy.title, exclude_id=policy.id)
    if not policy.excerpt or ("content" in data and "excerpt" not in data):
        policy.excerpt = make_excerpt(policy.content)
    _apply_publish_state(policy)
    policy.updated_by = updated_by
    policy.touch()

    session.add(policy)
    session.commit()
    session.refresh(policy)
    return ServiceResult.ok(data=policy)


def delete_policy(session: Session, policy_id: UUID) -> bool:
    policy = session.get(Policy, policy_id)
    if policy is None:
        return False
    session.delete(policy)
    session.commit()
    logger.info("Policy %s deleted", policy.slug)
    return True


def get_policy(session: Session, policy_id: UUID) -> Optional[Policy]:
    return session.get(Policy, policy_id)


def get_policy_by_slug(
    session: Session,
    slug: str,
    count_view: bool = False,
    published_only: bool = False,
) -> Optional[Policy]:
    statement = select(Policy).where(Policy.slug == slug.lower())
    if published_only:
        statement = statement.where(Policy.status == ContentStatus.PUBLISHED)
    policy = session.exec(statement).first()
    if policy is not None and count_view:
        session.execute(update(Policy).where(Policy.id == policy.id).values(views=Policy.views + 1))
        session.commit()
        session.refresh(policy)
    return policy


def toggle_status(session: Session, policy_id: UUID) -> Optional[Policy]:
    """Publish a draft or archived policy, or move a published one back to draft."""
    policy = session.get(Policy, policy_id)
    if policy is None:
        return None
    policy.status = ContentStatus.DRAFT if policy.status == ContentStatus.PUBLISHED else ContentStatus.PUBLISHED
    _apply_publish_state(policy)
    policy.touch()
    session.add(policy)
    session.commit()
    session.refresh(policy)
    return policy


def toggle_featured(session: Session, policy_id: UUID) -> Optional[Policy]:
    policy = session.get(Policy, policy_id)
    if policy is None:
        return None
    policy.is_featured = not policy.is_featured
    policy.touch()
    session.add(policy)
    session.commit()
    session.refresh(policy)
    return policy


def list_policies(
    session: Session,
    *,
    status: Optional[str] = ContentStatus.PUBLISHED,
    category_id: Optional[UUID] = None,
    search: Optional[str] = None,
    featured: Optional[bool] = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Policy], int]:
    filters = []
    if status:
        filters.append(Policy.status == status)
    if category_id:
        filters.append(Policy.category_id == category_id)
    if featured is not None:
        filters.append(Policy.is_featured == featured)
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(Policy.title.ilike(pattern), Policy.excerpt.ilike(pattern), Policy.content.ilike(pattern))
        )

    total = session.exec(select(func.count()).select_from(Policy).where(*filters)).one()
    statement = (
        select(Policy)
        .where(*filters)
        .order_by(Policy.is_featured.desc(), Policy.published_at.desc(), Policy.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(session.exec(statement).all()), total


def get_stats(session: Session) -> dict[str, int]:
    rows = session.exec(select(Policy.status, func.count()).group_by(Policy.status)).all()
    stats = {status: 0 for status in ContentStatus.ALL}
    stats.update({status: count for status, count in rows})
    stats["total"] = sum(count for _, count in rows)
    return stats


def category_map(session: Session) -> dict[UUID, PolicyCategory]:
    return {c.id: c for c in session.exec(select(PolicyCategory)).all()}


def serialize_policy(policy: Policy, categories: Optional[dict[UUID, PolicyCategory]] = None) -> dict[str, Any]:
    category = (categories or {}).get(policy.category_id)
    if category is not None:
        category = {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "description": category.description,
            "icon": category.icon,
            "color": category.color,
            "order": category.order,
            "is_active": category.is_active,
        }
    return {
        "id": policy.id,
        "title": policy.title,
        "slug": policy.slug,
        "content": policy.content,
        "excerpt": policy.excerpt,
        "category_id": policy.category_id,
        "category": category,
        "pdf_url": policy.pdf_url,
        "pdf_file_name": policy.pdf_file_name,
        "effective_date": policy.effective_date,
        "version": policy.version,
        "status": policy.status,
        "is_featured": policy.is_featured,
        "views": policy.views,
        "published_at": policy.published_at,
        "created_at": policy.created_at,
        "updated_at": policy.updated_at,
    }
