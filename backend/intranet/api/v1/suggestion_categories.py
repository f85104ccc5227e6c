from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.db import SessionDep
from intranet.schemas import SuggestionCategoryCreate, SuggestionCategoryRead, SuggestionCategoryUpdate
from intranet.services import suggestions as suggestion_service

router = APIRouter()


@router.get("/", response_model=list[SuggestionCategoryRead])
def list_categories(session: SessionDep) -> list[SuggestionCategoryRead]:
    """Active categories for the submission form."""
    return [SuggestionCategoryRead.model_validate(c) for c in suggestion_service.list_categories(session)]


@router.get("/all", response_model=list[SuggestionCategoryRead])
def list_all_categories(session: SessionDep, current_admin: CurrentAdmin) -> list[SuggestionCategoryRead]:
    return [
        SuggestionCategoryRead.model_validate(c)
        for c in suggestion_service.list_categories(session, active_only=False)
    ]


@router.post("/", response_model=SuggestionCategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: SuggestionCategoryCreate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> SuggestionCategoryRead:
    return SuggestionCategoryRead.model_validate(suggestion_service.create_category(session, payload.model_dump()))


@router.patch("/{category_id}", response_model=SuggestionCategoryRead)
def update_category(
    category_id: UUID,
    payload: SuggestionCategoryUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> SuggestionCategoryRead:
    category = suggestion_service.update_category(session, category_id, payload.model_dump(exclude_unset=True))
    if category is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return SuggestionCategoryRead.model_validate(category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    raise_for_result(suggestion_service.delete_category(session, category_id))
