"""Suggestion box analytics and CSV export."""

from __future__ import annotations

import csv
import io
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Optional
from uuid import UUID

from sqlmodel import Session, select

from intranet.models import AdminUser, Suggestion
from intranet.models.suggestion import SuggestionStatus
from intranet.services.suggestions import category_names, date_range_filters

CATEGORY_COLORS = [
    "#c7a262",
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#8b5cf6",
    "#ef4444",
    "#06b6d4",
    "#ec4899",
    "#84cc16",
    "#f97316",
]

STATUS_COLORS = {
    "new": "#3b82f6",
    "reviewed": "#8b5cf6",
    "in_progress": "#f59e0b",
    "resolved": "#10b981",
    "archived": "#6b7280",
}

STATUS_LABELS = {
    "new": "New",
    "reviewed": "Reviewed",
    "in_progress": "In Progress",
    "resolved": "Resolved",
    "archived": "Archived",
}

DEFAULT_COLOR = "#6b7280"
UNCATEGORIZED = "Uncategorized"
EXPORT_COLUMNS = ["Date", "Category", "Status", "Content", "Admin Notes", "Reviewed By", "Reviewed At"]


@dataclass
class ReportFilters:
    start_date: date
    end_date: date
    category_id: Optional[UUID] = None
    status: Optional[str] = None

    @classmethod
    def last_days(cls, days: int = 30, **kwargs) -> "ReportFilters":
        today = date.today()
        return cls(start_date=today - timedelta(days=days), end_date=today, **kwargs)

    @property
    def days(self) -> int:
        return max(1, (self.end_date - self.start_date).days)


def _load(session: Session, filters: ReportFilters) -> list[Suggestion]:
    conditions = date_range_filters(filters.start_date, filters.end_date)
    if filters.category_id:
        conditions.append(Suggestion.category_id == filters.category_id)
    if filters.status:
        conditions.append(Suggestion.status == filters.status)
    statement = select(Suggestion).where(*conditions).order_by(Suggestion.created_at.desc())
    return list(session.exec(statement).all())


def get_report_stats(session: Session, filters: ReportFilters) -> dict[str, Any]:
    suggestions = _load(session, filters)
    total = len(suggestions)

    per_day = Counter(s.created_at.date().isoformat() for s in suggestions)
    peak_day, peak_count = (None, 0)
    if per_day:
        peak_day, peak_count = max(per_day.items(), key=lambda item: (item[1], item[0]))

    resolution_hours = [
        (s.reviewed_at - s.created_at).total_seconds() / 3600
        for s in suggestions
        if s.status == SuggestionStatus.RESOLVED and s.reviewed_at is not None
    ]
    average_resolution = (
        round(sum(resolution_hours) / len(resolution_hours), 1) if resolution_hours else None
    )

    return {
        "total": total,
        "average_per_day": round(total / filters.days, 1),
        "peak_day": peak_day,
        "peak_day_count": peak_count,
        "average_resolution_hours": average_resolution,
        "by_status": dict(Counter(s.status for s in suggestions)),
    }


def get_category_breakdown(session: Session, filters: ReportFilters) -> list[dict[str, Any]]:
    names = category_names(session)
    counts = Counter(names.get(s.category_id, UNCATEGORIZED) for s in _load(session, filters))
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [
        {"name": name, "value": value, "color": CATEGORY_COLORS[index % len(CATEGORY_COLORS)]}
        for index, (name, value) in enumerate(ordered)
    ]


def get_status_breakdown(session: Session, filters: ReportFilters) -> list[dict[str, Any]]:
    counts = Counter(s.status for s in _load(session, filters))
    return [
        {
            "status": status,
            "label": STATUS_LABELS.get(status, status),
            "value": value,
            "color": STATUS_COLORS.get(status, DEFAULT_COLOR),
        }
        for status, value in sorted(counts.items())
    ]


def get_timeline(session: Session, filters: ReportFilters) -> list[dict[str, Any]]:
    """Daily counts from start to end date, days without suggestions included."""
    counts = Counter(s.created_at.date() for s in _load(session, filters))
    timeline = []
    day = filters.start_date
    while day <= filters.end_date:
        timeline.append({"date": day.isoformat(), "count": counts.get(day, 0)})
        day += timedelta(days=1)
    return timeline


def export_rows(session: Session, filters: ReportFilters) -> list[dict[str, str]]:
    names = category_names(session)
    admins = {a.id: a.name for a in session.exec(select(AdminUser)).all()}
    return [
        {
            "Date": s.created_at.date().isoformat(),
            "Category": names.get(s.category_id, "N/A"),
            "Status": STATUS_LABELS.get(s.status, s.status),
            "Content": s.content,
            "Admin Notes": s.admin_notes or "",
            "Reviewed By": admins.get(s.reviewed_by, "") if s.reviewed_by else "",
            "Reviewed At": s.reviewed_at.date().isoformat() if s.reviewed_at else "",
        }
        for s in _load(session, filters)
    ]


def export_csv(session: Session, filters: ReportFilters) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    writer.writerows(export_rows(session, filters))
    return buffer.getvalue()
