from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from app.api.deps import SessionContextDep
from app.core.timeslots import format_time
from app.db import SessionDep
from app.models import TimeSlot
from app.schemas import TimeSlotCreate, TimeSlotRead, TimeSlotUpdate
from app.services import time_slots
from app.services.permissions import ensure_member

router = APIRouter()


def _serialize(slot: TimeSlot) -> TimeSlotRead:
    return TimeSlotRead(
        slot_id=slot.id,
        day=slot.weekday,
        time=format_time(slot.time_of_day),
        team_id=slot.team_id,
    )


@router.get("/", response_model=List[TimeSlotRead], summary="List time slots")
def list_time_slots(
    session: SessionDep,
    context: SessionContextDep,
    team_id: Optional[int] = Query(
        default=None, description="Include slots scoped to this team"
    ),
) -> List[TimeSlotRead]:
    if team_id is not None:
        ensure_member(session, context.user_id, team_id)
    return [_serialize(slot) for slot in time_slots.list_slots(session, team_id)]


@router.post(
    "/",
    response_model=TimeSlotRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add a slot to a team's catalog",
)
def create_time_slot(
    payload: TimeSlotCreate,
    session: SessionDep,
    context: SessionContextDep,
) -> TimeSlotRead:
    ensure_member(session, context.user_id, payload.team_id)
    slot = time_slots.create_team_slot(session, payload.team_id, payload.day, payload.time)
    return _serialize(slot)


@router.put(
    "/{slot_id}",
    response_model=TimeSlotRead,
    summary="Move a team-scoped slot to another day or time",
)
def update_time_slot(
    slot_id: int,
    payload: TimeSlotUpdate,
    session: SessionDep,
    context: SessionContextDep,
) -> TimeSlotRead:
    ensure_member(session, context.user_id, payload.team_id)
    slot = time_slots.update_team_slot(
        session, payload.team_id, slot_id, payload.day, payload.time
    )
    return _serialize(slot)


@router.delete(
    "/{slot_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a team-scoped slot",
)
def delete_time_slot(
    slot_id: int,
    session: SessionDep,
    context: SessionContextDep,
    team_id: int = Query(...),
) -> Response:
    ensure_member(session, context.user_id, team_id)
    time_slots.delete_team_slot(session, team_id, slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
