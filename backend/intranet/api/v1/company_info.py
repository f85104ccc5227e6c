from __future__ import annotations

from fastapi import APIRouter

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import CompanyInfoRead, CompanyInfoUpdate
from intranet.services import company_info

router = APIRouter()


@router.get("/", response_model=CompanyInfoRead)
def read_company_info(session: SessionDep) -> CompanyInfoRead:
    return CompanyInfoRead.model_validate(company_info.get_company_info(session))


@router.put("/", response_model=CompanyInfoRead)
def update_company_info(
    payload: CompanyInfoUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> CompanyInfoRead:
    info = company_info.update_company_info(session, payload.model_dump(exclude_unset=True))
    return CompanyInfoRead.model_validate(info)
