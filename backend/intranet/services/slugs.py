"""Slug and excerpt helpers shared by content services."""

from __future__ import annotations

import html
import re
from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

_TAGS = re.compile(r"<[^>]+>")
_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")

MAX_SLUG_LENGTH = 100


def slugify(value: str) -> str:
    """'Safety First: Q3 Update!' -> 'safety-first-q3-update'."""
    slug = _NON_WORD.sub("", value.lower()).strip()
    slug = _SEPARATORS.sub("-", slug).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


def unique_slug(session: Session, model, value: str, exclude_id: Optional[UUID] = None) -> str:
    """Slug for ``value`` that no other row of ``model`` uses, suffixed -2, -3... if needed."""
    base = slugify(value) or "item"
    candidate = base
    suffix = 2
    while True:
        statement = select(model.id).where(model.slug == candidate)
        if exclude_id is not None:
            statement = statement.where(model.id != exclude_id)
        if session.exec(statement).first() is None:
            return candidate
        tail = f"-{suffix}"
        candidate = base[: MAX_SLUG_LENGTH - len(tail)] + tail
        suffix += 1


def make_excerpt(content: str, max_length: int = 200) -> str:
    """Plain-text preview of HTML content, cut at a word boundary."""
    text = html.unescape(_TAGS.sub(" ", content or ""))
    text = " ".join(text.split())
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    if " " in cut:
        cut = cut[: cut.rfind(" ")]
    return cut.rstrip(" ,.;:") + "..."
