from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from app.core.errors import Unauthorized
from app.models import TeamMember


def is_member(session: Session, user_id: int, team_id: Optional[int]) -> bool:
    if team_id is None:
        return False
    membership = session.exec(
        select(TeamMember.user_id).where(
            TeamMember.user_id == user_id,
            TeamMember.team_id == team_id,
        )
    ).first()
    return membership is not None


def ensure_member(session: Session, user_id: int, team_id: Optional[int]) -> None:
    """Raise Unauthorized unless ``user_id`` is on ``team_id``.

    Unknown teams are reported exactly like foreign ones.
    """
    if not is_member(session, user_id, team_id):
        raise Unauthorized("Unauthorized: not a member of this team")
