from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query

from app.api.deps import SessionContextDep
from app.core.errors import Unauthorized
from app.db import SessionDep
from app.schemas import AvailabilityReplace, AvailabilityUpdate, SlotAvailability
from app.services import availability
from app.services.permissions import ensure_member

router = APIRouter()


@router.get(
    "/",
    response_model=List[SlotAvailability],
    summary="Get weekly availability of a team member",
)
def read_availability(
    session: SessionDep,
    context: SessionContextDep,
    user_id: Optional[int] = Query(default=None, description="Defaults to the caller"),
    team_id: Optional[int] = Query(default=None, description="Defaults to the caller's team"),
) -> List[SlotAvailability]:
    target_user = user_id if user_id is not None else context.user_id
    target_team = team_id if team_id is not None else context.team_id
    if target_user != context.user_id:
        # Teammates may read each other's availability, outsiders may not
        ensure_member(session, context.user_id, target_team)
    return availability.get_availability(session, target_user, target_team)


@router.put(
    "/",
    response_model=List[SlotAvailability],
    summary="Set availability for a single slot",
)
def update_availability(
    payload: AvailabilityUpdate,
    session: SessionDep,
    context: SessionContextDep,
) -> List[SlotAvailability]:
    if payload.user_id != context.user_id:
        raise Unauthorized("Unauthorized: cannot change another player's availability")
    team_id = payload.team_id if payload.team_id is not None else context.team_id
    availability.set_availability(
        session,
        context.user_id,
        team_id,
        payload.day,
        payload.time,
        payload.available,
    )
    return availability.get_availability(session, context.user_id, team_id)


@router.post(
    "/",
    response_model=List[SlotAvailability],
    summary="Replace availability with the selected slots",
)
def replace_availability(
    payload: AvailabilityReplace,
    session: SessionDep,
    context: SessionContextDep,
) -> List[SlotAvailability]:
    availability.replace_availability(
        session, context.user_id, context.team_id, payload.selected_slots
    )
    return availability.get_availability(session, context.user_id, context.team_id)
