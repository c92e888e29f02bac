from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from app.core.config import settings

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless the pragma is set per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _build_engine():
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
    engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
    if engine.dialect.name == "sqlite":
        enable_sqlite_foreign_keys(engine)
    return engine


engine = _build_engine()


def init_db(bind: Engine | None = None) -> None:
    """Create database tables and seed the default slot catalog."""
    # Imported here so every table is registered on the metadata
    from app import models  # noqa: F401
    from app.services.time_slots import seed_default_slots

    bind = bind or engine
    SQLModel.metadata.create_all(bind=bind)
    if settings.SEED_DEFAULT_TIME_SLOTS:
        with Session(bind) as session:
            created = seed_default_slots(session)
        if created:
            logger.info(f"Seeded {created} default time slots")


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_session)]
