"""
In-memory repository used for development and tests.
"""

from __future__ import annotations

from typing import Any, Optional

from pm_autopilot.core.logging import get_logger
from pm_autopilot.repositories.base import BaseRepository, T

logger = get_logger(__name__)


class InMemoryRepository(BaseRepository[T]):
    """
    Dictionary-backed repository.

    Records are copied on the way in and out so callers never share state
    with the store.
    """

    model_type: type[T]
    entity_name: str = "record"

    def __init__(self) -> None:
        self._records: dict[str, T] = {}

    async def get(self, id: str) -> Optional[T]:
        """Get a record by ID."""
        record = self._records.get(id)
        return record.model_copy(deep=True) if record else None

    async def save(self, entity: T) -> T:
        """Save a record."""
        entity.touch()
        self._records[entity.id] = entity.model_copy(deep=True)
        logger.debug(f"{self.entity_name} saved", record_id=entity.id)
        return entity

    async def update_fields(self, id: str, **fields: Any) -> Optional[T]:
        """Update individual fields of a record."""
        record = self._records.get(id)
        if record is None:
            return None

        data = record.model_dump()
        data.update(fields)
        updated = self.model_type.model_validate(data)
        updated.touch()
        self._records[id] = updated
        logger.debug(f"{self.entity_name} updated", record_id=id, fields=list(fields))
        return updated.model_copy(deep=True)

    async def delete(self, id: str) -> bool:
        """Delete a record by ID."""
        if id in self._records:
            del self._records[id]
            logger.debug(f"{self.entity_name} deleted", record_id=id)
            return True
        return False

    async def list(
        self,
        filters: Optional[dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[T]:
        """List records with optional equality filters."""
        records = self._filter(filters)
        records.sort(key=lambda r: r.created_at, reverse=True)
        return [r.model_copy(deep=True) for r in records[offset : offset + limit]]

    async def count(self, filters: Optional[dict[str, Any]] = None) -> int:
        """Count records with optional equality filters."""
        return len(self._filter(filters))

    async def exists(self, id: str) -> bool:
        """Check if a record exists."""
        return id in self._records

    def _filter(self, filters: Optional[dict[str, Any]]) -> list[T]:
        records = list(self._records.values())
        for field, value in (filters or {}).items():
            records = [r for r in records if getattr(r, field) == value]
        return records
