"""
Sign-up and sign-in endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from pm_autopilot.api.deps import get_auth_service, get_current_session
from pm_autopilot.domain.user import AuthSession
from pm_autopilot.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


class CredentialsRequest(BaseModel):
    """Email and password."""

    email: str = Field(..., description="Login email")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    user_id: str
    email: str


class TokenResponse(BaseModel):
    """Issued bearer token."""

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: str
    email: str


@router.post("/sign-up", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Register a new user."""
    user = await auth_service.sign_up(request.email, request.password)
    return UserResponse(user_id=user.id, email=user.email)


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    request: CredentialsRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange credentials for a bearer token."""
    token, session = await auth_service.sign_in(request.email, request.password)
    return TokenResponse(
        access_token=token,
        expires_at=session.expires_at,
        user_id=session.user_id,
        email=session.email,
    )


@router.get("/me", response_model=AuthSession)
async def current_user(session: AuthSession = Depends(get_current_session)) -> AuthSession:
    """Return the caller's session."""
    return session
