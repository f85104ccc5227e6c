from __future__ import annotations

from datetime import date, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from intranet.api.deps import CurrentAdmin
from intranet.db import SessionDep
from intranet.schemas import PaginatedResponse, SuggestionCreate, SuggestionRead, SuggestionUpdate
from intranet.schemas.suggestion import (
    CategoryBreakdownItem,
    ReportStats,
    StatusBreakdownItem,
    TimelinePoint,
)
from intranet.services import suggestion_report
from intranet.services import suggestions as suggestion_service
from intranet.services.suggestion_report import ReportFilters

router = APIRouter()


def get_report_filters(
    start_date: Optional[date] = Query(None, description="Defaults to 30 days ago"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    category_id: Optional[UUID] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
) -> ReportFilters:
    end = end_date or date.today()
    start = start_date or end - timedelta(days=30)
    if start > end:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="start_date must be before end_date")
    return ReportFilters(start_date=start, end_date=end, category_id=category_id, status=status_filter)


@router.post("/", status_code=status.HTTP_201_CREATED)
def submit_suggestion(payload: SuggestionCreate, session: SessionDep) -> dict:
    """Anonymous submission, no sign-in required."""
    result = suggestion_service.submit_suggestion(session, payload.content, payload.category_id)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result.message)
    return {"message": result.message, "id": str(result.data.id)}


@router.get("/", response_model=PaginatedResponse[SuggestionRead])
def list_suggestions(
    session: SessionDep,
    current_admin: CurrentAdmin,
    status_filter: Optional[str] = Query(None, alias="status"),
    category_id: Optional[UUID] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[SuggestionRead]:
    items, total = suggestion_service.list_suggestions(
        session,
        status=status_filter,
        category_id=category_id,
        start_date=start_date,
        end_date=end_date,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    names = suggestion_service.category_names(session)
    return PaginatedResponse.create(
        [SuggestionRead(**suggestion_service.serialize_suggestion(s, names)) for s in items],
        total,
        page,
        page_size,
    )


@router.get("/report/stats", response_model=ReportStats)
def report_stats(
    session: SessionDep,
    current_admin: CurrentAdmin,
    filters: ReportFilters = Depends(get_report_filters),
) -> ReportStats:
    return ReportStats(**suggestion_report.get_report_stats(session, filters))


@router.get("/report/categories", response_model=list[CategoryBreakdownItem])
def report_categories(
    session: SessionDep,
    current_admin: CurrentAdmin,
    filters: ReportFilters = Depends(get_report_filters),
) -> list[CategoryBreakdownItem]:
    return [CategoryBreakdownItem(**row) for row in suggestion_report.get_category_breakdown(session, filters)]


@router.get("/report/statuses", response_model=list[StatusBreakdownItem])
def report_statuses(
    session: SessionDep,
    current_admin: CurrentAdmin,
    filters: ReportFilters = Depends(get_report_filters),
) -> list[StatusBreakdownItem]:
    return [StatusBreakdownItem(**row) for row in suggestion_report.get_status_breakdown(session, filters)]


@router.get("/report/timeline", response_model=list[TimelinePoint])
def report_timeline(
    session: SessionDep,
    current_admin: CurrentAdmin,
    filters: ReportFilters = Depends(get_report_filters),
) -> list[TimelinePoint]:
    return [TimelinePoint(**row) for row in suggestion_report.get_timeline(session, filters)]


@router.get("/export")
def export_suggestions(
    session: SessionDep,
    current_admin: CurrentAdmin,
    filters: ReportFilters = Depends(get_report_filters),
) -> Response:
    """CSV download of the filtered suggestions."""
    filename = f"suggestions-{filters.start_date.isoformat()}-to-{filters.end_date.isoformat()}.csv"
    return Response(
        content=suggestion_report.export_csv(session, filters),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{suggestion_id}", response_model=SuggestionRead)
def read_suggestion(suggestion_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> SuggestionRead:
    suggestion = suggestion_service.get_suggestion(session, suggestion_id)
    if suggestion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Suggestion not found")
    return SuggestionRead(
        **suggestion_service.serialize_suggestion(suggestion, suggestion_service.category_names(session))
    )


@router.patch("/{suggestion_id}", response_model=SuggestionRead)
def update_suggestion(
    suggestion_id: UUID,
    payload: SuggestionUpdate,
    session: SessionDep,
    current_admin: CurrentAdmin,
) -> SuggestionRead:
    suggestion = suggestion_service.update_suggestion(
        session,
        suggestion_id,
        payload.model_dump(exclude_unset=True),
        reviewed_by=current_admin.id,
    )
    if suggestion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Suggestion not found")
    return SuggestionRead(
        **suggestion_service.serialize_suggestion(suggestion, suggestion_service.category_names(session))
    )


@router.delete("/{suggestion_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_suggestion(suggestion_id: UUID, session: SessionDep, current_admin: CurrentAdmin) -> None:
    if not suggestion_service.delete_suggestion(session, suggestion_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Suggestion not found")
