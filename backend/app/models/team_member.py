from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


class TeamMember(SQLModel, table=True):
    """Team membership with per-user role."""

    __tablename__ = "team_members"
    __table_args__ = (
        # A player belongs to at most one team
        Index("uq_team_members_user_id", "user_id", unique=True),
        {"sqlite_autoincrement": False},
    )

    user_id: int = Field(
        foreign_key="users.id", primary_key=True, nullable=False, ondelete="CASCADE"
    )
    team_id: int = Field(
        foreign_key="teams.id",
        primary_key=True,
        nullable=False,
        index=True,
        ondelete="CASCADE",
    )
    role: str = Field(default="player", max_length=255)
    joined_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
