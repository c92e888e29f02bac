from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .availability import SlotAvailability


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class TeamUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class TeamRead(BaseModel):
    id: int
    name: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TeamMemberCreate(BaseModel):
    user_id: int
    role: str = Field(default="player", min_length=1, max_length=255)


class TeamMemberUpdate(BaseModel):
    user_id: int
    role: str = Field(..., min_length=1, max_length=255)


class TeamMemberDelete(BaseModel):
    user_id: int


class TeamMemberRead(BaseModel):
    user_id: int
    display_name: str
    role: str
    joined_at: datetime


class TeamProfile(TeamRead):
    """Team details together with its roster."""

    members: List[TeamMemberRead] = []


class MemberAvailability(BaseModel):
    user_id: int
    display_name: str
    role: str
    slots: List[SlotAvailability]
