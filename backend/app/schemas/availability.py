from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SlotAvailability(BaseModel):
    """One catalog slot as seen by one user."""

    day: str
    time: str
    available: bool


class SlotSelection(BaseModel):
    day: str = Field(..., description="Weekday name, e.g. Monday")
    time: str = Field(..., description="Time of day in HH:MM format")


class AvailabilityUpdate(SlotSelection):
    """Single-slot write."""

    user_id: int
    team_id: Optional[int] = None
    available: bool


class AvailabilityReplace(BaseModel):
    """Bulk submission; every listed slot becomes available, the rest are cleared."""

    selected_slots: List[SlotSelection] = Field(default_factory=list)
