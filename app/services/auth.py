"""Authentication service for Google OAuth sign-in and app sessions."""

import logging
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode
import httpx

from app.config import get_settings
from app.models.auth import OAuthCredentials, Session, UserProfile
from app.services.sessions import SessionStore, generate_session_token

logger = logging.getLogger(__name__)

OAUTH_SCOPES = [
    "https://www.googleapis.com/auth/userinfo.profile",
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/cloud-platform",
]

STATE_TTL_SECONDS = 600


class AuthError(Exception):
    """Raised when an OAuth callback cannot be turned into a session."""


class OAuthStateCache:
    """One-time OAuth ``state`` values issued with consent URLs."""

    def __init__(self, ttl_seconds: int = STATE_TTL_SECONDS):
        self.ttl = timedelta(seconds=ttl_seconds)
        self._issued: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def issue(self) -> str:
        state = secrets.token_urlsafe(24)
        with self._lock:
            self._prune()
            self._issued[state] = datetime.now(timezone.utc)
        return state

    def consume(self, state: str | None) -> bool:
        """Return True if ``state`` was issued and not yet used or expired."""
        if not state:
            return False
        with self._lock:
            self._prune()
            return self._issued.pop(state, None) is not None

    def _prune(self) -> None:
        cutoff = datetime.now(timezone.utc) - self.ttl
        for state in [s for s, issued_at in self._issued.items() if issued_at < cutoff]:
            del self._issued[state]


class AuthService:
    """Service for Google OAuth and session management."""

    def __init__(self, store: SessionStore, states: OAuthStateCache):
        self.store = store
        self.states = states
        self.settings = get_settings()

    def build_auth_url(self) -> str:
        """Build the Google consent URL.

        Requests offline access with a forced consent prompt so Google
        always returns a refresh token.
        """
        params = {
            "client_id": self.settings.google_client_id,
            "redirect_uri": self.settings.redirect_uri,
            "response_type": "code",
            "scope": " ".join(OAUTH_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "state": self.states.issue(),
        }
        return f"{self.settings.google_auth_uri}?{urlencode(params)}"

    async def _request_token(self, data: dict[str, str]) -> dict[str, Any]:
        """POST to the Google token endpoint."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                self.settings.google_token_uri,
                data={
                    "client_id": self.settings.google_client_id,
                    "client_secret": self.settings.google_client_secret,
                    **data,
                },
            )
            response.raise_for_status()
            payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Token endpoint did not return a JSON object")
        return payload

    async def _fetch_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch the Google profile of the token's owner."""
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.get(
                self.settings.google_userinfo_url,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            profile = response.json()
        if not isinstance(profile, dict):
            raise ValueError("Userinfo endpoint did not return a JSON object")
        return profile

    async def complete_login(self, code: str | None, state: str | None = None) -> Session:
        """Exchange an authorization code for tokens and create a session."""
        if self.settings.oauth_verify_state and not self.states.consume(state):
            raise AuthError("Invalid or expired OAuth state")
        if not code:
            raise AuthError("Missing authorization code")

        try:
            token_payload = await self._request_token({
                "code": code,
                "redirect_uri": self.settings.redirect_uri,
                "grant_type": "authorization_code",
            })
            credentials = OAuthCredentials.from_token_response(token_payload)
            user = UserProfile(**await self._fetch_user_info(credentials.access_token))
        except httpx.HTTPError as e:
            raise AuthError(f"Google token exchange failed: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise AuthError(f"Unexpected response from Google: {e}") from e

        session = Session(
            token=generate_session_token(),
            credentials=credentials,
            user=user,
        )
        await self.store.put(session)
        logger.info(f"Created session for user {user.id}")
        return session

    async def get_session(self, session_token: str | None) -> Session | None:
        """Resolve a session from its token."""
        if not session_token:
            return None
        return await self.store.get(session_token)

    async def refresh_credentials(self, session: Session) -> Session:
        """Refresh expired credentials using the stored refresh token.

        Returns the session unchanged when no refresh is needed or possible.
        """
        credentials = session.credentials
        if not credentials.expired or not credentials.refresh_token:
            return session

        try:
            payload = await self._request_token({
                "refresh_token": credentials.refresh_token,
                "grant_type": "refresh_token",
            })
            refreshed = OAuthCredentials.from_token_response(payload)
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Token refresh failed for user {session.user.id}: {e}")
            return session

        if not refreshed.refresh_token:
            refreshed.refresh_token = credentials.refresh_token
        updated = session.model_copy(update={"credentials": refreshed})
        await self.store.put(updated)
        logger.info(f"Refreshed access token for user {session.user.id}")
        return updated

    async def logout(self, session_token: str | None) -> bool:
        """Invalidate a session token."""
        if not session_token:
            return False
        return await self.store.delete(session_token)
