from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.db import SessionDep
from intranet.schemas import DepartmentCreate, DepartmentRead, DepartmentUpdate
from intranet.services import directory

router = APIRouter()


@router.get("/", response_model=List[DepartmentRead])
def list_departments(
    session: SessionDep,
    category: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
) -> List[DepartmentRead]:
    departments = directory.list_departments(session, category=category, active_only=not include_inactive)
    return [DepartmentRead.model_validate(d) for d in departments]


@router.get("/{department_id}", response_model=DepartmentRead)
def read_department(department_id: UUID, session: SessionDep) -> DepartmentRead:
    department = directory.get_department(session, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")
    return DepartmentRead.model_validate(department)


@router.post("/", response_model=DepartmentRead, status_code=status.HTTP_201_CREATED)
def create_department(payload: DepartmentCreate, session: SessionDep, current_admin: CurrentAdmin) -> DepartmentRead:
    result = directory.create_department(session, payload.model_dump())
    raise_for_result(result)
    return DepartmentRead.model_validate(result.data)


@router.patch("/{department_id}", response_model=DepartmentRead)
def update_department(
    department_id: UUID,
    payload: DepartmentUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> DepartmentRead:
    result = directory.update_department(session, department_id, payload.model_dump(exclude_unset=True))
    raise_for_result(result)
    return DepartmentRead.model_validate(result.data)


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(department_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    raise_for_result(directory.delete_department(session, department_id))
