from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from intranet.api.deps import CurrentAdmin
from intranet.api.errors import raise_for_result
from intranet.db import SessionDep
from intranet.schemas import ContactCreate, ContactRead, ContactUpdate, PaginatedResponse
from intranet.services import directory

router = APIRouter()


def _read(session, contact) -> ContactRead:
    return ContactRead(**directory.serialize_contact(contact, directory.department_names(session)))


@router.get("/", response_model=PaginatedResponse[ContactRead])
def list_contacts(
    session: SessionDep,
    search: Optional[str] = Query(None, max_length=100),
    department_id: Optional[UUID] = Query(None),
    location: Optional[str] = Query(None),
    emergency: bool = Query(False, description="Emergency contacts only"),
    management: bool = Query(False, description="Management only"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
) -> PaginatedResponse[ContactRead]:
    items, total = directory.list_contacts(
        session,
        search=search,
        department_id=department_id,
        location=location,
        emergency_only=emergency,
        management_only=management,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    names = directory.department_names(session)
    return PaginatedResponse.create(
        [ContactRead(**directory.serialize_contact(c, names)) for c in items], total, page, page_size
    )


@router.get("/emergency", response_model=list[ContactRead])
def emergency_contacts(session: SessionDep) -> list[ContactRead]:
    names = directory.department_names(session)
    return [ContactRead(**directory.serialize_contact(c, names)) for c in directory.get_emergency_contacts(session)]


@router.get("/{contact_id}", response_model=ContactRead)
def read_contact(contact_id: UUID, session: SessionDep) -> ContactRead:
    contact = directory.get_contact(session, contact_id)
    if contact is None or not contact.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return _read(session, contact)


@router.post("/", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
def create_contact(payload: ContactCreate, session: SessionDep, current_admin: CurrentAdmin) -> ContactRead:
    result = directory.create_contact(session, payload.model_dump())
    raise_for_result(result)
    return _read(session, result.data)


@router.patch("/{contact_id}", response_model=ContactRead)
def update_contact(
    contact_id: UUID,
    payload: ContactUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> ContactRead:
    result = directory.update_contact(session, contact_id, payload.model_dump(exclude_unset=True))
    raise_for_result(result)
    return _read(session, result.data)


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contact(contact_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not directory.delete_contact(session, contact_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
