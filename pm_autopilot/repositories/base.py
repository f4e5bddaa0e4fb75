"""
Base repository interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from pm_autopilot.domain.base import Record

T = TypeVar("T", bound=Record)


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base class for repositories.

    Listings are ordered by creation time, newest first. Updates carry no
    concurrency token: the last write wins.
    """

    @abstractmethod
    async def get(self, id: str) -> Optional[T]:
        """Get an entity by ID."""
        ...

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Insert or replace an entity and return the stored record."""
        ...

    @abstractmethod
    async def update_fields(self, id: str, **fields: Any) -> Optional[T]:
        """Set individual fields on an entity; returns None if it does not exist."""
        ...

    @abstractmethod
    async def delete(self, id: str) -> bool:
        """Delete an entity by ID."""
        ...

    @abstractmethod
    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[T]:
        """List entities with optional equality filters."""
        ...

    @abstractmethod
    async def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """Count entities matching optional equality filters."""
        ...

    @abstractmethod
    async def exists(self, id: str) -> bool:
        """Check if an entity exists."""
        ...
