"""Availability ledger: the only writer of ``availability`` rows.

Every operation checks team membership first. Reads left-join the slot
catalog so slots without a declaration come back as unavailable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, select

from app.core.errors import UnknownSlot, ValidationError
from app.core.timeslots import format_time
from app.models import AvailabilityEntry, TimeSlot
from app.schemas import MemberAvailability, SlotAvailability, SlotSelection
from app.services import membership
from app.services.permissions import ensure_member
from app.services.time_slots import WEEKDAY_ORDER, catalog_condition, find_slot, list_slots

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}


def slot_catalog(session: Session, team_id: Optional[int]) -> List[TimeSlot]:
    """Slots a team can declare against: global ones plus its own."""
    return list_slots(session, team_id)


def _declarations(session: Session, user_id: int, team_id: int):
    statement = (
        select(TimeSlot, AvailabilityEntry.available)
        .outerjoin(
            AvailabilityEntry,
            (AvailabilityEntry.slot_id == TimeSlot.id)
            & (AvailabilityEntry.user_id == user_id),
        )
        .where(catalog_condition(team_id))
        .order_by(WEEKDAY_ORDER, TimeSlot.time_of_day, TimeSlot.id)
    )
    return session.exec(statement).all()


def _to_rows(declarations) -> List[SlotAvailability]:
    return [
        SlotAvailability(
            day=slot.weekday,
            time=format_time(slot.time_of_day),
            available=bool(available),
        )
        for slot, available in declarations
    ]


def get_availability(session: Session, user_id: int, team_id: Optional[int]) -> List[SlotAvailability]:
    ensure_member(session, user_id, team_id)
    return _to_rows(_declarations(session, user_id, team_id))


def resolve_slot(session: Session, team_id: Optional[int], weekday: str, time_of_day: str) -> TimeSlot:
    slot = find_slot(session, team_id, weekday, time_of_day)
    if slot is None:
        raise UnknownSlot(f"No time slot for {weekday} at {time_of_day}")
    return slot


def _upsert_statement(session: Session, user_id: int, slot_id: int, available: bool):
    dialect = session.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Availability upsert is not supported on {dialect}")
    now = datetime.now(timezone.utc)
    statement = insert(AvailabilityEntry).values(
        user_id=user_id,
        slot_id=slot_id,
        available=available,
        updated_at=now,
    )
    return statement.on_conflict_do_update(
        index_elements=["user_id", "slot_id"],
        set_={"available": statement.excluded.available, "updated_at": now},
    )


def set_availability(
    session: Session,
    user_id: int,
    team_id: Optional[int],
    weekday: str,
    time_of_day: str,
    available: bool,
) -> None:
    ensure_member(session, user_id, team_id)
    slot = resolve_slot(session, team_id, weekday, time_of_day)
    # Single INSERT .. ON CONFLICT statement: concurrent writers never see a
    # duplicate or a missing row, the last one to commit wins.
    session.exec(_upsert_statement(session, user_id, slot.id, available))
    session.commit()


def _insert_entries(session: Session, user_id: int, slot_ids: Iterable[int]) -> None:
    now = datetime.now(timezone.utc)
    for slot_id in slot_ids:
        session.add(
            AvailabilityEntry(user_id=user_id, slot_id=slot_id, available=True, updated_at=now)
        )
    session.flush()


def replace_availability(
    session: Session,
    user_id: int,
    team_id: Optional[int],
    selected_slots: List[SlotSelection],
) -> None:
    """Make exactly ``selected_slots`` available and clear every other entry.

    The clear and the re-insert commit together; if anything fails in between
    the transaction rolls back and the ledger keeps its previous state.
    """
    ensure_member(session, user_id, team_id)
    if not selected_slots:
        raise ValidationError("At least one slot must be selected")

    # Resolve everything before touching the ledger
    slot_ids = list(
        dict.fromkeys(
            resolve_slot(session, team_id, selection.day, selection.time).id
            for selection in selected_slots
        )
    )

    try:
        session.exec(delete(AvailabilityEntry).where(AvailabilityEntry.user_id == user_id))
        _insert_entries(session, user_id, slot_ids)
        session.commit()
    except Exception:
        session.rollback()
        logger.exception(f"Replacing availability for user {user_id} failed; rolled back")
        raise
    logger.info(f"User {user_id} replaced availability with {len(slot_ids)} slots")


def team_availability(session: Session, team_id: int) -> List[MemberAvailability]:
    """Availability grid of every member, in roster order."""
    result: List[MemberAvailability] = []
    for member, user in membership.list_members(session, team_id):
        result.append(
            MemberAvailability(
                user_id=user.id,
                display_name=user.display_name,
                role=member.role,
                slots=_to_rows(_declarations(session, user.id, team_id)),
            )
        )
    return result
