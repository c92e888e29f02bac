"""Turns a provider identity into the internal identity stored in the session.

This is the single place where an external account id becomes an internal
user id. Running it again for the same account always yields the same user id;
the team id reflects membership at call time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from app.core.errors import ConflictError, IdentityCorruptionError
from app.services import identity, membership

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExternalIdentity:
    """Account id and display name reported by the OAuth provider."""

    external_id: str
    display_name: str


@dataclass(frozen=True)
class ReconciledIdentity:
    user_id: int
    team_id: Optional[int] = None


def reconcile(session: Session, external: ExternalIdentity) -> ReconciledIdentity:
    user = identity.find_by_external_id(session, external.external_id)
    if user is None:
        try:
            user = identity.create_user(
                session, external.external_id, external.display_name
            )
            logger.info(
                f"First login for external id {external.external_id}: user {user.id}"
            )
        except ConflictError:
            # Another request created the row between our lookup and insert
            logger.warning(
                f"Concurrent first login for external id {external.external_id}; re-reading"
            )
            user = identity.find_by_external_id(session, external.external_id)
            if user is None:
                logger.error(
                    f"External id {external.external_id} conflicted on insert but "
                    f"cannot be read back"
                )
                raise IdentityCorruptionError(
                    f"Identity for external id {external.external_id} is inconsistent"
                ) from None
    else:
        user = identity.refresh_display_name(session, user, external.display_name)

    team_id = membership.current_team(session, user.id)
    return ReconciledIdentity(user_id=user.id, team_id=team_id)
