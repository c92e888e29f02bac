from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.core.config import settings


def create_token(
    subject: str | Any,
    expires_delta: timedelta,
    token_type: str,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "exp": now + expires_delta,
        "iat": now,
        "sub": str(subject),
        "type": token_type,
    }
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(user_id: int, team_id: int | None) -> str:
    # team_id stays null for users without a team, never 0
    return create_token(
        user_id,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "access",
        {"team_id": team_id},
    )


def create_refresh_token(user_id: int) -> str:
    return create_token(
        user_id,
        timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        "refresh",
    )


def create_oauth_state(provider: str) -> str:
    """Signed, short-lived value echoed back by the provider on callback."""
    return create_token(
        provider,
        timedelta(minutes=settings.OAUTH_STATE_EXPIRE_MINUTES),
        "oauth_state",
    )


def verify_oauth_state(state: str, provider: str) -> None:
    payload = verify_token(state, token_type="oauth_state")
    if payload.get("sub") != provider:
        raise ValueError("OAuth state was issued for another provider")


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
        if payload.get("type") != token_type:
            raise JWTError("Invalid token type")
        return payload
    except JWTError as exc:
        raise ValueError("Invalid token") from exc
