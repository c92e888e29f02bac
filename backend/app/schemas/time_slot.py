from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TimeSlotCreate(BaseModel):
    team_id: int
    day: str = Field(..., description="Weekday name, e.g. Monday")
    time: str = Field(..., description="Time of day in HH:MM format")


class TimeSlotRead(BaseModel):
    slot_id: int
    day: str
    time: str
    team_id: Optional[int] = None


class TimeSlotUpdate(BaseModel):
    """New day and time for a team-scoped slot."""

    team_id: int
    day: str = Field(..., description="Weekday name, e.g. Monday")
    time: str = Field(..., description="Time of day in HH:MM format")
