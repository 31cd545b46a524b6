"""Current user and logout endpoints."""

from fastapi import APIRouter, Depends, Header

from app.models.auth import LogoutResponse, Session, UserResponse
from app.routers.auth import get_auth_service, get_current_session
from app.services.auth import AuthService
from app.utils.helpers import extract_bearer_token

router = APIRouter(tags=["users"])


@router.get("/user", response_model=UserResponse)
async def get_user(
    session: Session = Depends(get_current_session),
) -> UserResponse:
    """Get the signed-in user's profile."""
    return UserResponse(user=session.user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    authorization: str | None = Header(default=None),
    auth_service: AuthService = Depends(get_auth_service),
) -> LogoutResponse:
    """Log out, discarding the session if there is one."""
    await auth_service.logout(extract_bearer_token(authorization))
    return LogoutResponse(success=True)
