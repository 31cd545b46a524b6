"""Google OAuth endpoints and session dependencies."""

import logging
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse

from app.config import get_settings
from app.models.auth import AuthUrlResponse, Session
from app.services.auth import AuthError, AuthService, OAuthStateCache
from app.services.sessions import SessionStore
from app.utils.helpers import extract_bearer_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def get_session_store(request: Request) -> SessionStore:
    """Dependency for the application's session store."""
    return request.app.state.session_store


def get_oauth_states(request: Request) -> OAuthStateCache:
    """Dependency for the application's pending OAuth states."""
    return request.app.state.oauth_states


def get_auth_service(
    store: SessionStore = Depends(get_session_store),
    states: OAuthStateCache = Depends(get_oauth_states),
) -> AuthService:
    """Dependency for auth service."""
    return AuthService(store, states)


async def get_current_session(
    authorization: str | None = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> Session:
    """Resolve the session for the request's bearer token."""
    session_token = extract_bearer_token(authorization)
    if not session_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    session = await auth_service.get_session(session_token)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_upstream_session(
    session: Session = Depends(get_current_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> Session:
    """Resolve the current session with fresh Google credentials."""
    return await auth_service.refresh_credentials(session)


def _frontend_redirect(**params: str) -> RedirectResponse:
    settings = get_settings()
    return RedirectResponse(
        url=f"{settings.frontend_url}?{urlencode(params)}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/google", response_model=AuthUrlResponse)
async def get_auth_url(
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthUrlResponse:
    """Return the Google consent URL."""
    return AuthUrlResponse(auth_url=auth_service.build_auth_url())


@router.get("/callback")
async def auth_callback(
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> RedirectResponse:
    """Complete Google sign-in and hand the session token to the front end."""
    if error:
        logger.warning(f"Google sign-in was not completed: {error}")
        return _frontend_redirect(error="auth_failed")

    try:
        session = await auth_service.complete_login(code, state)
    except AuthError as e:
        logger.error(f"Auth error: {e}")
        return _frontend_redirect(error="auth_failed")

    return _frontend_redirect(session=session.token, authenticated="true")
