import logging

from fastapi import APIRouter, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from app.api.deps import BattleNetDep, SessionContextDep
from app.core.config import settings
from app.core.limiter import limiter
from app.core.security import (
    create_access_token,
    create_oauth_state,
    create_refresh_token,
    verify_oauth_state,
    verify_token,
)
from app.db import SessionDep
from app.models import User
from app.schemas import RefreshTokenRequest, SessionRead, TokenPair
from app.services import identity, membership
from app.services.battlenet import PROVIDER_NAME
from app.services.reconciliation import ReconciledIdentity, reconcile

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_provider(provider: str) -> None:
    if provider != PROVIDER_NAME:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown authentication provider: {provider}",
        )


def _issue_tokens(resolved: ReconciledIdentity) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(resolved.user_id, resolved.team_id),
        refresh_token=create_refresh_token(resolved.user_id),
        user_id=resolved.user_id,
        team_id=resolved.team_id,
    )


@router.get("/{provider}/login", summary="Start provider login")
@limiter.limit(settings.AUTH_RATE_LIMIT)
def begin_login(request: Request, provider: str, client: BattleNetDep) -> RedirectResponse:
    _ensure_provider(provider)
    if not client.configured:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Battle.net login is not configured",
        )
    logger.info(f"Starting authentication for provider: {provider}")
    return RedirectResponse(
        client.authorization_url(create_oauth_state(provider)),
        status_code=status.HTTP_302_FOUND,
    )


@router.get(
    "/callback/{provider}",
    response_model=TokenPair,
    summary="Complete provider login and obtain tokens",
)
@limiter.limit(settings.AUTH_RATE_LIMIT)
def complete_login(
    request: Request,
    provider: str,
    session: SessionDep,
    client: BattleNetDep,
    code: str = Query(..., min_length=1),
    state: str = Query(..., min_length=1),
) -> TokenPair:
    _ensure_provider(provider)
    try:
        verify_oauth_state(state, provider)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired login state",
        ) from None

    external = client.fetch_identity(code)
    resolved = reconcile(session, external)
    logger.info(
        f"Authentication successful for user {resolved.user_id} (team {resolved.team_id})"
    )
    return _issue_tokens(resolved)


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh tokens and re-read team membership",
)
def refresh_tokens(payload: RefreshTokenRequest, session: SessionDep) -> TokenPair:
    try:
        refresh_payload = verify_token(payload.refresh_token, token_type="refresh")
        user_id = int(refresh_payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        ) from None

    if not session.get(User, user_id):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token payload",
        )

    # Membership may have changed since login
    team_id = membership.current_team(session, user_id)
    return _issue_tokens(ReconciledIdentity(user_id=user_id, team_id=team_id))


@router.get("/me", response_model=SessionRead, summary="Current session identity")
def read_session(session: SessionDep, context: SessionContextDep) -> SessionRead:
    user = identity.get_user(session, context.user_id)
    return SessionRead(
        user_id=context.user_id,
        team_id=context.team_id,
        display_name=user.display_name,
    )
