from __future__ import annotations

import logging
from typing import Any

from sqlmodel import Session, select

from intranet.models import CompanyInfo

logger = logging.getLogger(__name__)

DEFAULT_VISION = "To be a leading, responsible mining company that creates value for all stakeholders."
DEFAULT_MISSION = "To mine safely, efficiently and sustainably while developing our people and host communities."
DEFAULT_CORE_VALUES = [
    {"title": "Safety", "description": "We put the safety of our people first.", "icon": "ShieldCheck"},
    {"title": "Integrity", "description": "We act honestly and keep our commitments.", "icon": "Scale"},
    {"title": "Teamwork", "description": "We work together to achieve shared goals.", "icon": "Users"},
    {"title": "Excellence", "description": "We strive for the highest standards.", "icon": "Award"},
]


def get_company_info(session: Session) -> CompanyInfo:
    """Return the single company info row, creating it with defaults if missing."""
    info = session.exec(select(CompanyInfo)).first()
    if info is None:
        info = CompanyInfo(
            vision=DEFAULT_VISION,
            mission=DEFAULT_MISSION,
            core_values=[dict(value) for value in DEFAULT_CORE_VALUES],
        )
        session.add(info)
        session.commit()
        session.refresh(info)
        logger.info("Company info created with defaults")
    return info


def update_company_info(session: Session, data: dict[str, Any]) -> CompanyInfo:
    info = get_company_info(session)
    for key, value in data.items():
        if value is None and key in ("vision", "mission", "core_values"):
            continue
        setattr(info, key, value)
    info.touch()
    session.add(info)
    session.commit()
    session.refresh(info)
    return info
