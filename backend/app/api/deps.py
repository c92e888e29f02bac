from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2AuthorizationCodeBearer

from app.core.config import settings
from app.core.security import verify_token
from app.services.battlenet import BattleNetClient, get_battlenet_client

oauth2_scheme = OAuth2AuthorizationCodeBearer(
    authorizationUrl=f"{settings.API_V1_STR}/auth/battlenet/login",
    tokenUrl=f"{settings.API_V1_STR}/auth/callback/battlenet",
    refreshUrl=f"{settings.API_V1_STR}/auth/refresh",
)


@dataclass(frozen=True)
class SessionContext:
    """Identity resolved at login and carried by the access token."""

    user_id: int
    team_id: Optional[int] = None


def _credentials_error(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_session_context(token: str = Depends(oauth2_scheme)) -> SessionContext:
    try:
        payload = verify_token(token, token_type="access")
    except ValueError:
        raise _credentials_error("Could not validate credentials") from None

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _credentials_error("Invalid authentication payload") from None

    team_id = payload.get("team_id")
    if team_id is not None and not isinstance(team_id, int):
        raise _credentials_error("Invalid authentication payload")
    return SessionContext(user_id=user_id, team_id=team_id)


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]
BattleNetDep = Annotated[BattleNetClient, Depends(get_battlenet_client)]
