"""
Email/password authentication and bearer token resolution.
"""

from __future__ import annotations

from pm_autopilot.core.exceptions import AuthenticationError, InvalidInputError
from pm_autopilot.core.logging import get_logger
from pm_autopilot.core.security import (
    create_access_token,
    decode_access_token,
    generate_id,
    hash_password,
    verify_password,
)
from pm_autopilot.domain.user import AuthSession, User
from pm_autopilot.repositories.base import BaseRepository

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


class AuthService:
    """Signs users up and in, and turns bearer tokens into sessions."""

    def __init__(self, user_repository: BaseRepository[User]) -> None:
        self.user_repository = user_repository

    @staticmethod
    def _normalize_email(email: str) -> str:
        email = (email or "").strip().lower()
        local, _, domain = email.partition("@")
        if not local or "." not in domain:
            raise InvalidInputError("A valid email address is required", field="email")
        return email

    async def sign_up(self, email: str, password: str) -> User:
        """
        Register a new user.

        Raises:
            InvalidInputError: If the email is malformed or taken, or the
                password is too short
        """
        email = self._normalize_email(email)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise InvalidInputError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        if await self.user_repository.get_by_email(email) is not None:
            raise InvalidInputError("Email is already registered", field="email")

        user = User(id=generate_id("user"), email=email, password_hash=hash_password(password))
        user.created_by = user.id
        await self.user_repository.save(user)

        logger.info("User signed up", user_id=user.id)
        return user

    async def sign_in(self, email: str, password: str) -> tuple[str, AuthSession]:
        """
        Verify credentials and issue a bearer token.

        Returns:
            Tuple of (token, session)

        Raises:
            AuthenticationError: If the credentials do not match
        """
        user = await self.user_repository.get_by_email((email or "").strip().lower())
        if user is None or not verify_password(password or "", user.password_hash):
            logger.warning("Sign-in rejected")
            raise AuthenticationError("Invalid email or password")

        token, expires_at = create_access_token(user.id)
        logger.info("User signed in", user_id=user.id)
        return token, AuthSession(user_id=user.id, email=user.email, expires_at=expires_at)

    async def resolve(self, token: str) -> AuthSession:
        """
        Resolve a bearer token into the caller's session.

        Raises:
            AuthenticationError: If the token is invalid or its user is gone
        """
        user_id, expires_at = decode_access_token(token)
        user = await self.user_repository.get(user_id)
        if user is None:
            raise AuthenticationError("User no longer exists")
        return AuthSession(user_id=user.id, email=user.email, expires_at=expires_at)
