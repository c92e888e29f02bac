from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Player record linked to one external identity."""

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Provider-assigned id (Battle.net account id); written once, never updated
    external_id: str = Field(index=True, unique=True, max_length=255, nullable=False)
    display_name: str = Field(max_length=255)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), nullable=False)
