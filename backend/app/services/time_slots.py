"""Slot catalog: global weekly slots plus slots a team adds for itself."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import case, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import NotFound, ValidationError
from app.core.timeslots import DEFAULT_SLOT_TIMES, WEEKDAYS, parse_time, parse_weekday
from app.models import TimeSlot

WEEKDAY_ORDER = case(
    {day.value: day.order for day in WEEKDAYS},
    value=TimeSlot.weekday,
    else_=len(WEEKDAYS),
)


def catalog_condition(team_id: Optional[int]):
    if team_id is None:
        return TimeSlot.team_id.is_(None)
    return or_(TimeSlot.team_id.is_(None), TimeSlot.team_id == team_id)


def list_slots(session: Session, team_id: Optional[int]) -> List[TimeSlot]:
    statement = (
        select(TimeSlot)
        .where(catalog_condition(team_id))
        .order_by(WEEKDAY_ORDER, TimeSlot.time_of_day, TimeSlot.id)
    )
    return list(session.exec(statement).all())


def find_slot(session: Session, team_id: Optional[int], weekday: str, time_of_day: str):
    day = parse_weekday(weekday)
    at = parse_time(time_of_day)
    return session.exec(
        select(TimeSlot).where(
            catalog_condition(team_id),
            TimeSlot.weekday == day.value,
            TimeSlot.time_of_day == at,
        )
    ).first()


def create_team_slot(
    session: Session, team_id: int, weekday: str, time_of_day: str
) -> TimeSlot:
    if find_slot(session, team_id, weekday, time_of_day) is not None:
        raise ValidationError("Time slot already exists")
    slot = TimeSlot(
        weekday=parse_weekday(weekday).value,
        time_of_day=parse_time(time_of_day),
        team_id=team_id,
    )
    session.add(slot)
    session.commit()
    session.refresh(slot)
    return slot


def _get_team_slot(session: Session, team_id: int, slot_id: int) -> TimeSlot:
    slot = session.get(TimeSlot, slot_id)
    # Global slots are not owned by any team
    if not slot or slot.team_id != team_id:
        raise NotFound("Time slot not found")
    return slot


def update_team_slot(
    session: Session, team_id: int, slot_id: int, weekday: str, time_of_day: str
) -> TimeSlot:
    """Move a team slot to another day or time.

    Declarations stay attached to the slot and follow it.
    """
    slot = _get_team_slot(session, team_id, slot_id)
    day = parse_weekday(weekday)
    at = parse_time(time_of_day)
    if (slot.weekday, slot.time_of_day) == (day.value, at):
        return slot
    if find_slot(session, team_id, day, at) is not None:
        raise ValidationError("Time slot already exists")

    slot.weekday = day.value
    slot.time_of_day = at
    session.add(slot)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ValidationError("Time slot already exists") from exc
    session.refresh(slot)
    return slot


def delete_team_slot(session: Session, team_id: int, slot_id: int) -> None:
    slot = _get_team_slot(session, team_id, slot_id)
    session.delete(slot)
    session.commit()


def seed_default_slots(session: Session) -> int:
    """Insert the missing Monday..Sunday 19:00/21:00 global slots."""
    existing = {
        (slot.weekday, slot.time_of_day)
        for slot in session.exec(select(TimeSlot).where(TimeSlot.team_id.is_(None)))
    }
    created = 0
    for day in WEEKDAYS:
        for at in DEFAULT_SLOT_TIMES:
            if (day.value, at) in existing:
                continue
            session.add(TimeSlot(weekday=day.value, time_of_day=at))
            created += 1
    if created:
        session.commit()
    return created
