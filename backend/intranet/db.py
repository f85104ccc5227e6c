from __future__ import annotations

from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from intranet.core.config import settings


def _build_engine():
    connect_args = {}
    engine_kwargs = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        # In-memory SQLite: one shared connection so every session sees the same tables
        if settings.DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    return create_engine(settings.DATABASE_URL, connect_args=connect_args, **engine_kwargs)


engine = _build_engine()


def init_db() -> None:
    """Create database tables."""
    # Import models so every table is registered on the metadata
    import intranet.models  # noqa: F401

    SQLModel.metadata.create_all(bind=engine)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


def session_factory() -> Session:
    """New session for work that outlives a request (background tasks, Celery)."""
    return Session(engine)


SessionDep = Annotated[Session, Depends(get_session)]
