from __future__ import annotations

from typing import List

from fastapi import APIRouter, Response, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.api.deps import SessionContextDep
from app.core.errors import ValidationError
from app.db import SessionDep
from app.models import Team
from app.schemas import (
    MemberAvailability,
    TeamCreate,
    TeamMemberCreate,
    TeamMemberDelete,
    TeamMemberRead,
    TeamMemberUpdate,
    TeamProfile,
    TeamRead,
    TeamUpdate,
)
from app.services import availability, membership
from app.services.permissions import ensure_member

router = APIRouter()

CREATOR_ROLE = "captain"


def _roster(session: Session, team_id: int) -> List[TeamMemberRead]:
    return [
        TeamMemberRead(
            user_id=user.id,
            display_name=user.display_name,
            role=member.role,
            joined_at=member.joined_at,
        )
        for member, user in membership.list_members(session, team_id)
    ]


@router.post(
    "/",
    response_model=TeamRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create team",
)
def create_team(
    payload: TeamCreate,
    session: SessionDep,
    context: SessionContextDep,
) -> Team:
    if membership.current_team(session, context.user_id) is not None:
        raise ValidationError("Leave your current team before creating a new one")

    team = Team(name=payload.name.strip())
    session.add(team)
    session.flush()
    # The creator joins in the same transaction so no team is left without a captain
    membership.add_member(
        session,
        team_id=team.id,
        user_id=context.user_id,
        role=CREATOR_ROLE,
        commit=False,
    )
    try:
        session.commit()
    except IntegrityError as exc:
        # A concurrent request already put the creator on a team
        session.rollback()
        raise ValidationError("Leave your current team before creating a new one") from exc
    session.refresh(team)
    return team


@router.get("/{team_id}", response_model=TeamProfile, summary="Get team with roster")
def get_team(team_id: int, session: SessionDep, context: SessionContextDep) -> TeamProfile:
    ensure_member(session, context.user_id, team_id)
    team = membership.get_team(session, team_id)
    profile = TeamProfile.model_validate(team)
    return profile.model_copy(update={"members": _roster(session, team_id)})


@router.put("/{team_id}", response_model=TeamRead, summary="Rename team")
def rename_team(
    team_id: int,
    payload: TeamUpdate,
    session: SessionDep,
    context: SessionContextDep,
) -> Team:
    ensure_member(session, context.user_id, team_id)
    team = membership.get_team(session, team_id)
    team.name = payload.name.strip()
    session.add(team)
    session.commit()
    session.refresh(team)
    return team


@router.delete(
    "/{team_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete team",
)
def delete_team(team_id: int, session: SessionDep, context: SessionContextDep) -> Response:
    ensure_member(session, context.user_id, team_id)
    team = membership.get_team(session, team_id)
    # Memberships and team-scoped slots go with it via ON DELETE CASCADE
    session.delete(team)
    session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{team_id}/members",
    response_model=List[TeamMemberRead],
    summary="List team members",
)
def list_team_members(
    team_id: int, session: SessionDep, context: SessionContextDep
) -> List[TeamMemberRead]:
    ensure_member(session, context.user_id, team_id)
    return _roster(session, team_id)


@router.post(
    "/{team_id}/members",
    response_model=List[TeamMemberRead],
    status_code=status.HTTP_201_CREATED,
    summary="Add a player to the team",
)
def add_team_member(
    team_id: int,
    payload: TeamMemberCreate,
    session: SessionDep,
    context: SessionContextDep,
) -> List[TeamMemberRead]:
    ensure_member(session, context.user_id, team_id)
    membership.add_member(
        session, team_id=team_id, user_id=payload.user_id, role=payload.role
    )
    return _roster(session, team_id)


@router.put(
    "/{team_id}/members",
    response_model=List[TeamMemberRead],
    summary="Change a member's role",
)
def update_team_member(
    team_id: int,
    payload: TeamMemberUpdate,
    session: SessionDep,
    context: SessionContextDep,
) -> List[TeamMemberRead]:
    ensure_member(session, context.user_id, team_id)
    membership.update_role(
        session, team_id=team_id, user_id=payload.user_id, role=payload.role
    )
    return _roster(session, team_id)


@router.delete(
    "/{team_id}/members",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a player from the team",
)
def remove_team_member(
    team_id: int,
    payload: TeamMemberDelete,
    session: SessionDep,
    context: SessionContextDep,
) -> Response:
    ensure_member(session, context.user_id, team_id)
    membership.remove_member(session, team_id=team_id, user_id=payload.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{team_id}/availability",
    response_model=List[MemberAvailability],
    summary="Weekly availability of every team member",
)
def read_team_availability(
    team_id: int, session: SessionDep, context: SessionContextDep
) -> List[MemberAvailability]:
    ensure_member(session, context.user_id, team_id)
    return availability.team_availability(session, team_id)
