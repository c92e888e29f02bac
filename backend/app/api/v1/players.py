from __future__ import annotations

from fastapi import APIRouter, Response, status
from sqlmodel import Session

from app.api.deps import SessionContextDep
from app.db import SessionDep
from app.schemas import PlayerRead
from app.services import identity, membership

router = APIRouter()


def _player(session: Session, user_id: int) -> PlayerRead:
    user = identity.get_user(session, user_id)
    profile = PlayerRead.model_validate(user)
    return profile.model_copy(update={"team_id": membership.current_team(session, user.id)})


@router.get("/me", response_model=PlayerRead, summary="Get current player profile")
def read_current_player(session: SessionDep, context: SessionContextDep) -> PlayerRead:
    return _player(session, context.user_id)


@router.get("/{user_id}", response_model=PlayerRead, summary="Get player profile")
def read_player(user_id: int, session: SessionDep, context: SessionContextDep) -> PlayerRead:
    return _player(session, user_id)


@router.delete(
    "/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete current player and their memberships",
)
def delete_current_player(session: SessionDep, context: SessionContextDep) -> Response:
    identity.delete_user(session, context.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
