from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.db import SessionDep
from intranet.schemas import CategoryOrder, PolicyCategoryCreate, PolicyCategoryRead, PolicyCategoryUpdate
from intranet.services import policies as policy_service

router = APIRouter()


@router.get("/", response_model=list[PolicyCategoryRead])
def list_categories(session: SessionDep) -> list[PolicyCategoryRead]:
    """Active categories for the policy library filter."""
    return [PolicyCategoryRead.model_validate(c) for c in policy_service.list_categories(session)]


@router.get("/all", response_model=list[PolicyCategoryRead])
def list_all_categories(session: SessionDep, current_admin: CurrentAdmin) -> list[PolicyCategoryRead]:
    return [
        PolicyCategoryRead.model_validate(c) for c in policy_service.list_categories(session, active_only=False)
    ]


@router.post("/", response_model=PolicyCategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: PolicyCategoryCreate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> PolicyCategoryRead:
    return PolicyCategoryRead.model_validate(policy_service.create_category(session, payload.model_dump()))


@router.put("/order", response_model=list[PolicyCategoryRead])
def reorder_categories(
    payload: CategoryOrder,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> list[PolicyCategoryRead]:
    raise_for_result(policy_service.reorder_categories(session, payload.ids))
    return [
        PolicyCategoryRead.model_validate(c) for c in policy_service.list_categories(session, active_only=False)
    ]


@router.patch("/{category_id}", response_model=PolicyCategoryRead)
def update_category(
    category_id: UUID,
    payload: PolicyCategoryUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> PolicyCategoryRead:
    category = policy_service.update_category(session, category_id, payload.model_dump(exclude_unset=True))
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return PolicyCategoryRead.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    raise_for_result(policy_service.delete_category(session, category_id))
