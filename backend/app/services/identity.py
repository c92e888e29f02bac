"""Identity store: the only writer of ``users`` rows."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.core.errors import ConflictError, NotFound
from app.models import User

logger = logging.getLogger(__name__)


def find_by_external_id(session: Session, external_id: str) -> Optional[User]:
    return session.exec(select(User).where(User.external_id == external_id)).one_or_none()


def get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def create_user(session: Session, external_id: str, display_name: str) -> User:
    """Insert a new user for ``external_id``.

    The unique constraint on ``external_id`` is the arbiter when two logins
    race; the loser gets ConflictError after its transaction is rolled back.
    """
    user = User(external_id=external_id, display_name=display_name)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise ConflictError(f"User with external id {external_id} already exists") from exc
    session.refresh(user)
    logger.info(f"Created user {user.id} for external id {external_id}")
    return user


def delete_user(session: Session, user_id: int) -> None:
    """Remove a user; memberships and availability go with it via ON DELETE CASCADE."""
    user = get_user(session, user_id)
    external_id = user.external_id
    session.delete(user)
    session.commit()
    logger.info(f"Deleted user {user_id} (external id {external_id})")


def refresh_display_name(session: Session, user: User, display_name: str) -> User:
    if not display_name or user.display_name == display_name:
        return user
    user.display_name = display_name
    user.updated_at = datetime.now(timezone.utc)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
