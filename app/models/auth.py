"""Authentication and session models."""

from datetime import datetime, timedelta, timezone
from typing import Any
from pydantic import BaseModel, Field


class OAuthCredentials(BaseModel):
    """Google OAuth token pair held for a session."""
    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    token_type: str = "Bearer"
    scope: str | None = None
    id_token: str | None = None
    expires_at: datetime | None = None

    @classmethod
    def from_token_response(
        cls,
        payload: dict[str, Any],
        now: datetime | None = None,
    ) -> "OAuthCredentials":
        """Build credentials from a Google token endpoint response."""
        now = now or datetime.now(timezone.utc)
        expires_in = payload.get("expires_in")
        expires_at = now + timedelta(seconds=int(expires_in)) if expires_in else None
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            token_type=payload.get("token_type", "Bearer"),
            scope=payload.get("scope"),
            id_token=payload.get("id_token"),
            expires_at=expires_at,
        )

    @property
    def expired(self) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= datetime.now(timezone.utc)


class UserProfile(BaseModel):
    """Authenticated Google user profile."""
    id: str = Field(..., min_length=1)
    name: str | None = None
    email: str | None = None
    picture: str | None = None

    model_config = {"extra": "ignore"}


class Session(BaseModel):
    """Server-side session created after a successful Google login."""
    token: str = Field(..., min_length=1)
    credentials: OAuthCredentials
    user: UserProfile
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AuthUrlResponse(BaseModel):
    """Google consent URL for the front end to navigate to."""
    auth_url: str = Field(..., alias="authUrl")

    model_config = {"populate_by_name": True}


class UserResponse(BaseModel):
    """Response payload for the current user."""
    user: UserProfile


class LogoutResponse(BaseModel):
    """Response payload for logout."""
    success: bool = True
