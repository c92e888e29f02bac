from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PlayerRead(BaseModel):
    id: int
    display_name: str
    created_at: datetime
    team_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class SessionRead(BaseModel):
    """Identity carried by the current access token."""

    user_id: int
    team_id: Optional[int] = None
    display_name: str


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user_id: int
    team_id: Optional[int] = None


class RefreshTokenRequest(BaseModel):
    refresh_token: str
