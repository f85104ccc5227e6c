"""Departments and staff contacts."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import Session, select

from intranet.models import Contact, Department
from intranet.services.results import FailureReason, ServiceResult

# === DEPARTMENTS ===


def list_departments(
    session: Session,
    category: Optional[str] = None,
    active_only: bool = True,
) -> list[Department]:
    statement = select(Department)
    if category:
        statement = statement.where(Department.category == category)
    if active_only:
        statement = statement.where(Department.is_active == True)  # noqa: E712
    return list(session.exec(statement.order_by(Department.order, Department.name)).all())


def get_department(session: Session, department_id: UUID) -> Optional[Department]:
    return session.get(Department, department_id)


def _code_taken(session: Session, code: str, exclude_id: Optional[UUID] = None) -> bool:
    statement = select(Department.id).where(Department.code == code)
    if exclude_id is not None:
        statement = statement.where(Department.id != exclude_id)
    return session.exec(statement).first() is not None


def create_department(session: Session, data: dict[str, Any]) -> ServiceResult:
    data = {**data, "code": data["code"].strip().upper()}
    if _code_taken(session, data["code"]):
        return ServiceResult.fail(FailureReason.CONFLICT, f"Department code {data['code']} already exists")
    department = Department(**data)
    session.add(department)
    session.commit()
    session.refresh(department)
    return ServiceResult.ok(data=department)


def update_department(session: Session, department_id: UUID, data: dict[str, Any]) -> ServiceResult:
    department = session.get(Department, department_id)
    if department is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Department not found")
    if data.get("code"):
        data = {**data, "code": data["code"].strip().upper()}
        if _code_taken(session, data["code"], exclude_id=department_id):
            return ServiceResult.fail(FailureReason.CONFLICT, f"Department code {data['code']} already exists")
    for key, value in data.items():
        setattr(department, key, value)
    department.touch()
    session.add(department)
    session.commit()
    session.refresh(department)
    return ServiceResult.ok(data=department)


def delete_department(session: Session, department_id: UUID) -> ServiceResult:
    department = session.get(Department, department_id)
    if department is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Department not found")
    contacts = session.exec(
        select(func.count()).select_from(Contact).where(Contact.department_id == department_id)
    ).one()
    if contacts:
        return ServiceResult.fail(
            FailureReason.CONFLICT,
            f"Department has {contacts} contacts. Move them first",
        )
    session.delete(department)
    session.commit()
    return ServiceResult.ok("Department deleted")


# === CONTACTS ===


def list_contacts(
    session: Session,
    *,
    search: Optional[str] = None,
    department_id: Optional[UUID] = None,
    location: Optional[str] = None,
    emergency_only: bool = False,
    management_only: bool = False,
    active_only: bool = True,
    skip: int = 0,
    limit: int = 50,
) -> tuple[list[Contact], int]:
    filters = []
    if active_only:
        filters.append(Contact.is_active == True)  # noqa: E712
    if department_id:
        filters.append(Contact.department_id == department_id)
    if location:
        filters.append(Contact.location == location)
    if emergency_only:
        filters.append(Contact.is_emergency_contact == True)  # noqa: E712
    if management_only:
        filters.append(Contact.is_management == True)  # noqa: E712
    if search:
        pattern = f"%{search}%"
        filters.append(
            or_(
                Contact.name.ilike(pattern),
                Contact.position.ilike(pattern),
                Contact.email.ilike(pattern),
                Contact.phone.ilike(pattern),
            )
        )

    total = session.exec(select(func.count()).select_from(Contact).where(*filters)).one()
    statement = select(Contact).where(*filters).order_by(Contact.name).offset(skip).limit(limit)
    return list(session.exec(statement).all()), total


def get_emergency_contacts(session: Session) -> list[Contact]:
    statement = (
        select(Contact)
        .where(Contact.is_active == True, Contact.is_emergency_contact == True)  # noqa: E712
        .order_by(Contact.name)
    )
    return list(session.exec(statement).all())


def get_contact(session: Session, contact_id: UUID) -> Optional[Contact]:
    return session.get(Contact, contact_id)


def create_contact(session: Session, data: dict[str, Any]) -> ServiceResult:
    if data.get("department_id") and session.get(Department, data["department_id"]) is None:
        return ServiceResult.fail(FailureReason.INVALID_INPUT, "Department not found")
    contact = Contact(**data)
    session.add(contact)
    session.commit()
    session.refresh(contact)
    return ServiceResult.ok(data=contact)


def update_contact(session: Session, contact_id: UUID, data: dict[str, Any]) -> ServiceResult:
    contact = session.get(Contact, contact_id)
    if contact is None:
        return ServiceResult.fail(FailureReason.NOT_FOUND, "Contact not found")
    if data.get("department_id") and session.get(Department, data["department_id"]) is None:
        return ServiceResult.fail(FailureReason.INVALID_INPUT, "Department not found")
    for key, value in data.items():
        setattr(contact, key, value)
    contact.touch()
    session.add(contact)
    session.commit()
    session.refresh(contact)
    return ServiceResult.ok(data=contact)


def delete_contact(session: Session, contact_id: UUID) -> bool:
    contact = session.get(Contact, contact_id)
    if contact is None:
        return False
    session.delete(contact)
    session.commit()
    return True


def department_names(session: Session) -> dict[UUID, str]:
    return {d.id: d.name for d in session.exec(select(Department)).all()}


def serialize_contact(contact: Contact, departments: dict[UUID, str]) -> dict[str, Any]:
    return {
        "id": contact.id,
        "name": contact.name,
        "phone": contact.phone,
        "phone_extension": contact.phone_extension,
        "email": contact.email,
        "department_id": contact.department_id,
        "department_name": departments.get(contact.department_id) if contact.department_id else None,
        "position": contact.position,
        "photo": contact.photo,
        "is_emergency_contact": contact.is_emergency_contact,
        "is_management": contact.is_management,
        "location": contact.location,
        "is_active": contact.is_active,
    }
