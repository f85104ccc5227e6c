from __future__ import annotations

from pydantic import BaseModel


class DashboardCounts(BaseModel):
    published_news: int
    draft_news: int
    published_talks: int
    draft_talks: int
    active_contacts: int
    active_apps: int
    portal_users: int
    push_subscribers: int
    new_suggestions: int


class StatusSlice(BaseModel):
    name: str
    published: int
    draft: int
    archived: int


class ActivityPoint(BaseModel):
    date: str
    news: int
    suggestions: int


class DashboardRead(BaseModel):
    counts: DashboardCounts
    content_status: list[StatusSlice]
    activity: list[ActivityPoint]
