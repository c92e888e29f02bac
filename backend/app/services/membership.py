"""Membership resolver and the team-membership CRUD used by the teams routes."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import NotFound, ValidationError
from app.models import Team, TeamMember, User

logger = logging.getLogger(__name__)


def current_team(session: Session, user_id: int) -> Optional[int]:
    """Return the id of the user's team, or None when they have none."""
    team_ids = session.exec(
        select(TeamMember.team_id)
        .where(TeamMember.user_id == user_id)
        .order_by(TeamMember.joined_at, TeamMember.team_id)
    ).all()
    if not team_ids:
        return None
    if len(team_ids) > 1:
        logger.warning(
            f"Data integrity: user {user_id} belongs to {len(team_ids)} teams "
            f"{list(team_ids)}; using team {team_ids[0]}"
        )
    return team_ids[0]


def get_team(session: Session, team_id: int) -> Team:
    team = session.get(Team, team_id)
    if not team:
        raise NotFound("Team not found")
    return team


def list_members(session: Session, team_id: int) -> List[Tuple[TeamMember, User]]:
    statement = (
        select(TeamMember, User)
        .join(User, TeamMember.user_id == User.id)
        .where(TeamMember.team_id == team_id)
        .order_by(TeamMember.joined_at, TeamMember.user_id)
    )
    return list(session.exec(statement).all())


def add_member(
    session: Session,
    *,
    team_id: int,
    user_id: int,
    role: str = "player",
    commit: bool = True,
) -> TeamMember:
    if not session.get(User, user_id):
        raise NotFound("User not found")
    existing_team = current_team(session, user_id)
    if existing_team == team_id:
        raise ValidationError("User is already a member of this team")
    if existing_team is not None:
        raise ValidationError("User already belongs to another team")

    membership = TeamMember(team_id=team_id, user_id=user_id, role=role)
    session.add(membership)
    if commit:
        try:
            session.commit()
        except IntegrityError as exc:
            # Concurrent join for the same user hit uq_team_members_user_id
            session.rollback()
            raise ValidationError("User already belongs to a team") from exc
        session.refresh(membership)
    return membership


def _get_membership(session: Session, team_id: int, user_id: int) -> TeamMember:
    membership = session.get(TeamMember, (user_id, team_id))
    if not membership:
        raise NotFound("User is not a member of the team")
    return membership


def update_role(session: Session, *, team_id: int, user_id: int, role: str) -> TeamMember:
    membership = _get_membership(session, team_id, user_id)
    membership.role = role
    session.add(membership)
    session.commit()
    session.refresh(membership)
    return membership


def remove_member(session: Session, *, team_id: int, user_id: int) -> None:
    membership = _get_membership(session, team_id, user_id)
    session.delete(membership)
    session.commit()
