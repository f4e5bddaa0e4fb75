"""
User repository.
"""

from __future__ import annotations

from typing import Optional

import asyncpg

from pm_autopilot.core.exceptions import DatabaseError, InvalidInputError
from pm_autopilot.domain.user import User
from pm_autopilot.repositories.memory import InMemoryRepository
from pm_autopilot.repositories.postgres import PostgresRepository


class InMemoryUserRepository(InMemoryRepository[User]):
    """In-memory user repository for development/testing."""

    model_type = User
    entity_name = "User"

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by login email."""
        matches = await self.list({"email": email}, limit=1)
        return matches[0] if matches else None


class PostgresUserRepository(PostgresRepository[User]):
    """PostgreSQL user repository."""

    model_type = User
    table = "users"

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by login email."""
        row = await self._fetchrow(f"SELECT * FROM {self.table} WHERE email = $1", email)
        return self._row_to_model(row) if row else None

    async def save(self, entity: User) -> User:
        """
        Insert or replace a user.

        Raises:
            InvalidInputError: If another user already holds the email
        """
        try:
            return await super().save(entity)
        except DatabaseError as e:
            # id clashes are upserts, so a unique violation here is the email
            if isinstance(e.__cause__, asyncpg.UniqueViolationError):
                raise InvalidInputError("Email is already registered", field="email") from e
            raise
