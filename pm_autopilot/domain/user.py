"""
User and authenticated session models.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from pm_autopilot.domain.base import Record


class User(Record):
    """A dashboard user signing in with email and password."""

    email: str = Field(..., description="Login email (lower-cased)")
    password_hash: str = Field(..., description="PBKDF2 password hash")


class AuthSession(BaseModel):
    """
    The authenticated caller.

    Resolved once per request from the bearer token and passed explicitly
    into every service call.
    """

    user_id: str = Field(..., description="Authenticated user ID")
    email: str = Field(..., description="Authenticated user email")
    expires_at: datetime = Field(..., description="Token expiry")
