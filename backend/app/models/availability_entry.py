from __future__ import annotations

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class AvailabilityEntry(SQLModel, table=True):
    """Declared availability of one user for one slot.

    A missing row means "not declared yet", which reads as unavailable.
    """

    __tablename__ = "availability"
    __table_args__ = {"sqlite_autoincrement": False}

    user_id: int = Field(
        foreign_key="users.id", primary_key=True, nullable=False, ondelete="CASCADE"
    )
    slot_id: int = Field(
        foreign_key="time_slots.id",
        primary_key=True,
        nullable=False,
        index=True,
        ondelete="CASCADE",
    )
    available: bool = Field(default=False, nullable=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
