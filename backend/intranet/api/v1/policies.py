from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.db import SessionDep
from intranet.schemas import PaginatedResponse, PolicyCreate, PolicyRead, PolicyStats, PolicyUpdate
from intranet.services import policies as policy_service

router = APIRouter()


def _read(session, policy) -> PolicyRead:
    return PolicyRead(**policy_service.serialize_policy(policy, policy_service.category_map(session)))


def _page(session, items, total, page, page_size) -> PaginatedResponse[PolicyRead]:
    categories = policy_service.category_map(session)
    return PaginatedResponse.create(
        [PolicyRead(**policy_service.serialize_policy(p, categories)) for p in items], total, page, page_size
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Policy not found")


@router.get("/", response_model=PaginatedResponse[PolicyRead])
def list_policies(
    session: SessionDep,
    category: Optional[str] = Query(None, description="Category slug"),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
) -> PaginatedResponse[PolicyRead]:
    """Published policies, featured first."""
    category_id = None
    if category:
        found = policy_service.get_category_by_slug(session, category)
        if found is None or not found.is_active:
            return PaginatedResponse.create([], 0, page, page_size)
        category_id = found.id
    items, total = policy_service.list_policies(
        session,
        category_id=category_id,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return _page(session, items, total, page, page_size)


@router.get("/admin", response_model=PaginatedResponse[PolicyRead])
def list_policies_admin(
    session: SessionDep,
    current_admin: CurrentAdmin,
    status_filter: Optional[str] = Query(None, alias="status"),
    category_id: Optional[UUID] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[PolicyRead]:
    """All policies regardless of status."""
    items, total = policy_service.list_policies(
        session,
        status=status_filter,
        category_id=category_id,
        search=search,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return _page(session, items, total, page, page_size)


@router.get("/stats", response_model=PolicyStats)
def policy_stats(session: SessionDep, current_admin: CurrentAdmin) -> PolicyStats:
    return PolicyStats(**policy_service.get_stats(session))


@router.get("/slug/{slug}", response_model=PolicyRead)
def read_policy_by_slug(slug: str, session: SessionDep) -> PolicyRead:
    policy = policy_service.get_policy_by_slug(session, slug, count_view=True, published_only=True)
    if policy is None:
        raise _not_found()
    return _read(session, policy)


@router.get("/{policy_id}", response_model=PolicyRead)
def read_policy(policy_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> PolicyRead:
    policy = policy_service.get_policy(session, policy_id)
    if policy is None:
        raise _not_found()
    return _read(session, policy)


@router.post("/", response_model=PolicyRead, status_code=status.HTTP_201_CREATED)
def create_policy(payload: PolicyCreate, session: SessionDep, current_admin: CurrentAdmin) -> PolicyRead:
    result = policy_service.create_policy(session, payload.model_dump(), created_by=current_admin.id)
    raise_for_result(result)
    return _read(session, result.data)


@router.patch("/{policy_id}", response_model=PolicyRead)
def update_policy(
    policy_id: UUID,
    payload: PolicyUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> PolicyRead:
    result = policy_service.update_policy(
        session, policy_id, payload.model_dump(exclude_unset=True), updated_by=current_admin.id
    )
    raise_for_result(result)
    return _read(session, result.data)


@router.post("/{policy_id}/toggle-status", response_model=PolicyRead)
def toggle_policy_status(policy_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> PolicyRead:
    policy = policy_service.toggle_status(session, policy_id)
    if policy is None:
        raise _not_found()
    return _read(session, policy)


@router.post("/{policy_id}/toggle-featured", response_model=PolicyRead)
def toggle_policy_featured(policy_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> PolicyRead:
    policy = policy_service.toggle_featured(session, policy_id)
    if policy is None:
        raise _not_found()
    return _read(session, policy)


@router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_policy(policy_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not policy_service.delete_policy(session, policy_id):
        raise _not_found()
