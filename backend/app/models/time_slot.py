from __future__ import annotations

from datetime import time
from typing import Optional

from sqlalchemy import Index, UniqueConstraint, text
from sqlmodel import Field, SQLModel


class TimeSlot(SQLModel, table=True):
    """Weekly slot in the catalog; global when team_id is null."""

    __tablename__ = "time_slots"
    __table_args__ = (
        UniqueConstraint("weekday", "time_of_day", "team_id", name="uq_time_slots_team"),
        # NULLs never collide in a unique constraint, so global slots need their own
        Index(
            "uq_time_slots_global",
            "weekday",
            "time_of_day",
            unique=True,
            sqlite_where=text("team_id IS NULL"),
            postgresql_where=text("team_id IS NULL"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    weekday: str = Field(max_length=9, nullable=False)
    time_of_day: time = Field(nullable=False)
    team_id: Optional[int] = Field(
        default=None,
        foreign_key="teams.id",
        nullable=True,
        index=True,
        ondelete="CASCADE",
    )
